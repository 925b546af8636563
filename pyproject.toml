[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "termqr"
version = "0.1.0"
description = "Pure Python QR Code Model 2 encoder with a compact terminal renderer"
requires-python = ">=3.10"
dependencies = []
keywords = ["qrcode", "qr", "barcode", "terminal", "reed-solomon"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
termqr = "termqr.console:main"

[tool.hatch.build.targets.wheel]
packages = ["termqr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
