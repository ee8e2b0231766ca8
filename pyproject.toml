[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "uberwolf"
version = "0.1.0"
description = "Decryption routines for WOLF RPG Editor game data, protection keys and WolfX files"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "wolf-rpg",
    "decryption",
    "aes",
    "sha512",
    "chacha20",
    "game-data",
    "wolfx",
]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
uberwolf-benchmark = "uberwolf.wolfx.benchmark:main"

[tool.hatch.build.targets.wheel]
packages = ["uberwolf"]

[tool.hatch.build.targets.sdist]
include = ["uberwolf", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
