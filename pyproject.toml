[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubscape"
version = "0.1.0"
description = "A ray-casting first-person maze explorer that reads .cub scene files"
requires-python = ">=3.10"
keywords = ["raycasting", "game", "maze", "first-person", "cub", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "numpy",
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pillow",
    "numpy",
]

[project.scripts]
cubscape = "cubscape.game:main"

[tool.hatch.build.targets.wheel]
packages = ["cubscape"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
