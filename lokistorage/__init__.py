"""Configuration models, validation and helpers for S3, GCS and Azure Blob storage backends."""

__version__ = "0.1.0"

__all__ = [
    "azure",
    "azure_connstr",
    "common",
    "gcs",
    "helm",
    "s3_config",
    "tokenizer",
    "yamlcompare",
]