[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "speechqual"
version = "0.1.0"
description = "Building blocks for single-ended speech quality assessment: perceptual transforms, LPC analysis, LSF quantisation, speech resynthesis and background noise estimation."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "speech",
    "audio",
    "quality",
    "lpc",
    "line spectral pairs",
    "psychoacoustics",
    "bark",
    "noise estimation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["speechqual"]

[tool.hatch.build.targets.sdist]
include = ["speechqual", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
