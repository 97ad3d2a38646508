[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "addrlang"
version = "0.1.0"
description = "Runtime values, tokens, syntax tree, JSON serialization and a bytecode virtual machine for the address language"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "address language",
    "interpreter",
    "virtual machine",
    "bytecode",
    "abstract syntax tree",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["addrlang"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
files = ["addrlang"]
