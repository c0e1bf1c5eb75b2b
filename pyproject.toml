[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "evmlite"
version = "0.1.0"
description = "Instruction tables, gas cost tables and execution state for an Ethereum Virtual Machine interpreter"
requires-python = ">=3.10"
dependencies = []
keywords = ["ethereum", "evm", "bytecode", "interpreter", "opcodes", "gas"]
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
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["evmlite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
