[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "keyten"
version = "0.1.0"
description = "A small streaming array language in the K tradition, with a chunked evaluator and interactive front-end helpers"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = ["k", "array-language", "apl", "interpreter", "repl", "vector"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
keyten-banner = "keyten.cli.banner:main"

[tool.hatch.build.targets.wheel]
packages = ["keyten"]

[tool.hatch.build.targets.sdist]
include = ["keyten", "tests"]

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
check_untyped_defs = true
