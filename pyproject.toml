[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "discpic"
version = "1.0.0"
description = "Turn pictures into raw audio tracks that show up as visible patterns when burned onto a CD or DVD"
requires-python = ">=3.10"
keywords = ["cd", "dvd", "burning", "audio track", "disc art", "image"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: CD Audio :: CD Writing",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]
dependencies = [
    "pillow",
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
discpic = "discpic.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["discpic"]

[tool.pytest.ini_options]
addopts = "-ra"
