[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deerengine"
version = "0.1.0"
description = "Core of a small game engine: events, layers, buffer layouts, transforms, an entity scene graph and scene serialization."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["game engine", "entity", "scene graph", "events", "layers", "transform", "quaternion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["deerengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
