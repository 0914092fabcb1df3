[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "minigit"
version = "0.1.0"
description = "A small interactive version control system with commits, branches, merges and diffs"
requires-python = ">=3.10"
dependencies = []
keywords = ["vcs", "version-control", "git", "cli", "merge", "diff"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minigit = "minigit.cli:main"

[tool.setuptools.packages.find]
include = ["minigit*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
