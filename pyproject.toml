[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sheetgrid"
version = "0.1.0"
description = "Cell references, shared strings, rich text, workbook parts and in-memory rows for XLSX spreadsheets"
requires-python = ">=3.10"
dependencies = []
keywords = ["xlsx", "spreadsheet", "excel", "office", "shared-strings", "rich-text", "formula"]
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
    "Topic :: Office/Business :: Financial :: Spreadsheet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sheetgrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
