[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dirgrep"
version = "0.1.0"
description = "Concurrent grep-like search for regular expressions across a directory tree"
requires-python = ">=3.10"
dependencies = []
keywords = ["grep", "search", "regex", "directory", "concurrent"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dirgrep = "dirgrep.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dirgrep"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
