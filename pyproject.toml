[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "circuit-types"
version = "2.1.5"
description = "Static structural, symbol and type analyses for arithmetic circuit programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["circuits", "type-checking", "static-analysis", "compiler", "zero-knowledge"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["circuit_types"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
