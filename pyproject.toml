[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lokistorage"
version = "0.1.0"
description = "Configuration models, validation and helpers for log storage backends (S3, GCS, Azure Blob)."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["logging", "storage", "s3", "gcs", "azure", "configuration", "bloom", "helm"]
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
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lokistorage"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
