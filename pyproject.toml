[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reportdsl"
version = "0.1.0"
description = "Lexer, syntax tree and PostgreSQL SELECT compiler for a small report filter language"
requires-python = ">=3.10"
dependencies = []
keywords = ["dsl", "filter", "sql", "query", "compiler", "report", "postgresql", "lexer"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["reportdsl"]

[tool.pytest.ini_options]
addopts = "-ra"
