[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "esnode"
version = "0.1.0"
description = "Storage-node primitives: ethash epoch sizing, cache and dataset generation, Keccak Merkle proofs and storage configuration"
requires-python = ">=3.10"
keywords = ["ethash", "merkle", "keccak", "storage", "proof"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Distributed Computing",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "pycryptodome",
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["esnode"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
