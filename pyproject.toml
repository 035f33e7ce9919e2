[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kafkaparts"
version = "0.1.0"
description = "Kafka topic partition lists, offsets and timeout helpers in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["kafka", "offsets", "partitions", "timeout", "deadline"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["kafkaparts"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
