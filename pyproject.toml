[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "samsa"
version = "0.1.8"
description = "Kafka/Redpanda wire protocol requests and responses, with Redpanda admin API data models."
requires-python = ">=3.10"
keywords = ["kafka", "redpanda", "protocol", "confluent"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["samsa"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
