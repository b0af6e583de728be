[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "buttonbinds"
version = "1.2.0"
description = "Bind gamepad controls to keyboard keys for local multiplayer in games with little or no controller support"
requires-python = ">=3.10"
keywords = ["gamepad", "controller", "keyboard", "bindings", "multiplayer", "uinput"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
buttonbinds = "buttonbinds.app:main"

[tool.hatch.build.targets.wheel]
packages = ["buttonbinds"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
