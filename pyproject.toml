[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "feeshare"
version = "0.1.0"
description = "Fee sharing for contract developers: registrations, queries, genesis state and fee payouts"
requires-python = ">=3.10"
dependencies = []
keywords = ["fees", "fee-sharing", "smart-contracts", "bech32", "genesis"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["feeshare"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
