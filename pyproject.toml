[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "szachy"
version = "0.1.0"
description = "Chess against a negamax computer opponent, with a pygame board and a search benchmark"
requires-python = ">=3.10"
keywords = ["chess", "negamax", "alpha-beta", "fen", "pygame", "game"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Board Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
szachy = "szachy.gui:main"
szachy-bench = "szachy.bench:main"

[tool.hatch.build.targets.wheel]
packages = ["szachy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
