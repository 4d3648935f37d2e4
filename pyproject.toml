[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ctrlgen"
version = "0.1.0"
description = "Deepcopy method generation, marker help rendering and output rules for modelled Go API type packages"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "code-generation",
    "deepcopy",
    "markers",
    "kubernetes",
    "generator",
    "terminal-help",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ctrlgen"]

[tool.hatch.build.targets.sdist]
include = [
    "ctrlgen",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
