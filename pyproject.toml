[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "agentws"
version = "1.5.0"
description = "State model, fuzzy filtering and text rendering for a dashboard of AI agents running in tmux panes."
requires-python = ">=3.10"
keywords = ["tmux", "agents", "workspaces", "dashboard", "fuzzy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["agentws*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
