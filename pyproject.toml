[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "distribyted"
version = "0.1.0"
description = "Read-only virtual filesystem over in-memory files and ZIP archives, with WebDAV, HTTP and mount adapters."
requires-python = ">=3.10"
keywords = ["filesystem", "virtual filesystem", "webdav", "fuse", "archive", "zip", "magnet"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Typing :: Typed",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["distribyted"]

[tool.hatch.build.targets.sdist]
include = ["distribyted", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
