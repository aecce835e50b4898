[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "daw-recorder"
version = "1.0.0"
description = "A small multi-track audio recorder that writes 16-bit stereo WAV takes and draws live waveforms."
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["audio", "recorder", "wav", "daw", "waveform", "level meter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Capture/Recording",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
daw-recorder = "daw_recorder.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["daw_recorder"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
