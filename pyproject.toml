[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reliasim"
version = "0.1.0"
description = "Markov-chain reliability models and simulators for redundant systems with and without repair"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "reliability",
    "markov-chain",
    "kolmogorov-equations",
    "monte-carlo",
    "discrete-event-simulation",
    "mttf",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
reliasim = "reliasim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["reliasim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
