[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gosql"
version = "0.1.0"
description = "A small SQL server that speaks a subset of the MySQL wire protocol and keeps its tables in JSON files"
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "database", "mysql", "protocol", "server", "json"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gosql = "gosql.server:main"

[tool.hatch.build.targets.wheel]
packages = ["gosql"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
