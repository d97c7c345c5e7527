[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "galtonsim"
version = "0.1.0"
description = "A Galton board simulation drawn into a 128x64 monochrome SSD1306-style frame buffer"
requires-python = ">=3.10"
dependencies = []
keywords = ["galton", "bean machine", "simulation", "ssd1306", "oled", "histogram", "frame buffer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
galtonsim = "galtonsim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["galtonsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
