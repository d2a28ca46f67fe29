[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "humanoid_op2"
version = "0.1.0"
description = "Control toolkit for a small humanoid robot: points, INI settings, servo bus packets and a ball-chasing soccer behaviour."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robotics",
    "humanoid",
    "servo",
    "dynamixel",
    "ini",
    "soccer",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["humanoid_op2"]

[tool.hatch.build.targets.sdist]
include = [
    "humanoid_op2",
    "tests",
    "pyproject.toml",
]

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
