[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asn1kit"
version = "0.1.0"
description = "Parsing of BER/DER encoded ASN.1 objects and DER encoding: OIDs, REALs, strings, sequences and sets"
requires-python = ">=3.10"
dependencies = []
keywords = ["asn1", "ber", "der", "oid", "x690", "encoding"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["asn1kit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
