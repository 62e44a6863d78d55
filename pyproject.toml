[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rmrkledger"
version = "0.1.0"
description = "An in-memory ledger of nestable, multi-resource NFTs with collections, resources, properties and priorities."
requires-python = ">=3.10"
dependencies = []
keywords = ["nft", "ledger", "nested-nft", "collections", "resources"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rmrkledger"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
