[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dbaasapi"
version = "0.6.0"
description = "Resource models, admission validation and reconciliation helpers for database-as-a-service provider accounts, connections, instances and policies."
requires-python = ">=3.10"
dependencies = []
keywords = ["dbaas", "database", "validation", "policy", "inventory", "provider", "label-selector"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dbaasapi"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
