[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "composekit"
version = "0.1.0"
description = "Progress reporting, prompts, line splitting and scan suggestions for container orchestration tooling"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compose",
    "containers",
    "progress",
    "terminal",
    "spinner",
    "prompt",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["composekit"]

[tool.hatch.build.targets.sdist]
include = ["composekit", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
