[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parahuff"
version = "0.1.0"
description = "Huffman compression of files, whole or split into independently coded blocks and chunks"
requires-python = ">=3.10"
dependencies = []
keywords = ["huffman", "compression", "entropy coding", "archiving"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
parahuff-serial = "parahuff.serial:main"
parahuff-blocked = "parahuff.blocked:main"
parahuff-chunked = "parahuff.chunked:main"
parahuff-randdata = "parahuff.randdata:main"

[tool.hatch.build.targets.wheel]
packages = ["parahuff"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
