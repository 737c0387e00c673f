[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shmring"
version = "0.1.0"
description = "A single-producer, single-consumer ring buffer in named shared memory"
requires-python = ">=3.10"
dependencies = []
keywords = ["shared memory", "ring buffer", "circular buffer", "queue", "ipc"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shmring = "shmring.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["shmring"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
