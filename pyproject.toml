[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coresim"
version = "0.1.0"
description = "Multicore CPU and operating-system scheduling simulator with a MIPS-like pipeline, instruction caches and paging"
requires-python = ">=3.10"
dependencies = []
keywords = ["simulator", "scheduling", "cpu", "pipeline", "cache", "paging", "operating-system"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
coresim = "coresim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["coresim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
