"""Configuration and URL layout for an Azure Blob Storage backend."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field

from lokistorage.azure_connstr import ConnectionStringError, parse_connection_string
from lokistorage.gcs import _parse_duration
from lokistorage.s3_config import _add_bool, _add_string, _dest, _read

logger = logging.getLogger(__name__)

AZURE_GLOBAL = "AzureGlobal"
AZURE_PUBLIC_CLOUD = "AzurePublicCloud"
AZURE_CHINA_CLOUD = "AzureChinaCloud"
AZURE_GERMAN_CLOUD = "AzureGermanCloud"
AZURE_US_GOVERNMENT = "AzureUSGovernment"

SUPPORTED_ENVIRONMENTS = (AZURE_GLOBAL, AZURE_CHINA_CLOUD, AZURE_GERMAN_CLOUD, AZURE_US_GOVERNMENT)

DEFAULT_ENDPOINTS = {
    AZURE_GLOBAL: "blob.core.windows.net",
    AZURE_CHINA_CLOUD: "blob.core.chinacloudapi.cn",
    AZURE_GERMAN_CLOUD: "blob.core.cloudapi.de",
    AZURE_US_GOVERNMENT: "blob.core.usgovcloudapi.net",
}

DEFAULT_CONTAINER_NAME = "loki"

# Attribute name and flag suffix (after "<prefix>azure.") for each option.
_AZURE_FLAG_NAMES = (
    ("environment", "environment"),
    ("storage_account_name", "account-name"),
    ("storage_account_key", "account-key"),
    ("connection_string", "connection-string"),
    ("container_name", "container-name"),
    ("endpoint_suffix", "endpoint-suffix"),
    ("use_managed_identity", "use-managed-identity"),
    ("use_federated_token", "use-federated-token"),
    ("user_assigned_id", "user-assigned-id"),
    ("chunk_delimiter", "chunk-delimiter"),
    ("request_timeout", "request-timeout"),
    ("download_buffer_size", "download-buffer-size"),
    ("upload_buffer_size", "upload-buffer-size"),
    ("upload_buffer_count", "download-buffer-count"),
    ("max_retries", "max-retries"),
    ("min_retry_delay", "min-retry-delay"),
    ("max_retry_delay", "max-retry-delay"),
    ("use_service_principal", "use-service-principal"),
    ("tenant_id", "tenant-id"),
    ("client_id", "client-id"),
    ("client_secret", "client-secret"),
)


class AzureConfigError(ValueError):
    """Raised when an Azure blob storage configuration is invalid."""


def _add_int(parser: argparse.ArgumentParser, name: str, default: int, help_text: str) -> None:
    parser.add_argument(f"-{name}", f"--{name}", dest=_dest(name), type=int,
                        default=default, help=help_text)


def _add_duration(parser: argparse.ArgumentParser, name: str, default: float,
                  help_text: str) -> None:
    parser.add_argument(f"-{name}", f"--{name}", dest=_dest(name), type=_parse_duration,
                        default=default, help=help_text)


@dataclass
class BlobStorageConfig:
    """Options for Azure blob storage; durations are in seconds."""

    environment: str = AZURE_GLOBAL
    storage_account_name: str = ""
    storage_account_key: str = field(default="", repr=False)
    connection_string: str = field(default="", repr=False)
    container_name: str = DEFAULT_CONTAINER_NAME
    endpoint_suffix: str = ""
    use_managed_identity: bool = False
    use_federated_token: bool = False
    user_assigned_id: str = ""
    use_service_principal: bool = False
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    tenant_id: str = ""
    chunk_delimiter: str = "-"
    download_buffer_size: int = 512000
    upload_buffer_size: int = 256000
    upload_buffer_count: int = 1
    request_timeout: float = 30.0
    max_retries: int = 5
    min_retry_delay: float = 0.01
    max_retry_delay: float = 0.5

    def register_flags(self, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        p = prefix + "azure."
        _add_string(parser, p + "environment", self.environment,
                    "Azure Cloud environment. Supported values are: "
                    f"{', '.join(SUPPORTED_ENVIRONMENTS)}.")
        _add_string(parser, p + "account-name", self.storage_account_name,
                    "Azure storage account name.")
        _add_string(parser, p + "account-key", self.storage_account_key,
                    "Azure storage account key.")
        _add_string(parser, p + "connection-string", self.connection_string,
                    "If set, the values of account-name and endpoint-suffix are not used.")
        _add_string(parser, p + "container-name", self.container_name,
                    "Name of the storage account blob container used to store chunks.")
        _add_string(parser, p + "endpoint-suffix", self.endpoint_suffix,
                    "Azure storage endpoint suffix without schema.")
        _add_bool(parser, p + "use-managed-identity", self.use_managed_identity,
                  "Use Managed Identity to authenticate to the Azure storage account.")
        _add_bool(parser, p + "use-federated-token", self.use_federated_token,
                  "Use Federated Token to authenticate to the Azure storage account.")
        _add_string(parser, p + "user-assigned-id", self.user_assigned_id,
                    "User assigned identity ID to authenticate to the Azure storage account.")
        _add_string(parser, p + "chunk-delimiter", self.chunk_delimiter,
                    "Chunk delimiter for blob ID to be used")
        _add_duration(parser, p + "request-timeout", self.request_timeout,
                      "Timeout for requests made against azure blob storage.")
        _add_int(parser, p + "download-buffer-size", self.download_buffer_size,
                 "Preallocated buffer size for downloads.")
        _add_int(parser, p + "upload-buffer-size", self.upload_buffer_size,
                 "Preallocated buffer size for uploads.")
        _add_int(parser, p + "download-buffer-count", self.upload_buffer_count,
                 "Number of buffers used to used to upload a chunk.")
        _add_int(parser, p + "max-retries", self.max_retries,
                 "Number of retries for a request which times out.")
        _add_duration(parser, p + "min-retry-delay", self.min_retry_delay,
                      "Minimum time to wait before retrying a request.")
        _add_duration(parser, p + "max-retry-delay", self.max_retry_delay,
                      "Maximum time to wait before retrying a request.")
        _add_bool(parser, p + "use-service-principal", self.use_service_principal,
                  "Use Service Principal to authenticate through Azure OAuth.")
        _add_string(parser, p + "tenant-id", self.tenant_id,
                    "Azure Tenant ID is used to authenticate through Azure OAuth.")
        _add_string(parser, p + "client-id", self.client_id,
                    "Azure Service Principal ID(GUID).")
        _add_string(parser, p + "client-secret", self.client_secret,
                    "Azure Service Principal secret key.")

    def update_from_flags(self, namespace: argparse.Namespace, prefix: str = "") -> None:
        p = prefix + "azure."
        for attribute, flag_name in _AZURE_FLAG_NAMES:
            setattr(self, attribute, _read(namespace, p + flag_name, getattr(self, attribute)))

    def validate(self) -> None:
        if self.environment not in SUPPORTED_ENVIRONMENTS:
            raise AzureConfigError(
                f"unsupported Azure blob storage environment: {self.environment}, "
                f"please select one of: {', '.join(SUPPORTED_ENVIRONMENTS)} "
            )
        if self.use_service_principal:
            if not self.tenant_id.strip():
                raise AzureConfigError(
                    "tenant_id is required if authentication using Service Principal is enabled"
                )
            if not self.client_id.strip():
                raise AzureConfigError(
                    "client_id is required if authentication using Service Principal is enabled"
                )
            if not self.client_secret.strip():
                raise AzureConfigError(
                    "client_secret is required if authentication using Service Principal is enabled"
                )

    def resource_url(self) -> str:
        """The storage account's service URL."""
        if self.connection_string:
            try:
                service_url = parse_connection_string(self.connection_string).service_url
            except ConnectionStringError as exc:
                logger.warning("could not get resource URL from connection string: %s", exc)
                return ""
            if not service_url:
                logger.warning("could not get resource URL from connection string")
            return service_url
        endpoint = self.endpoint_suffix or DEFAULT_ENDPOINTS.get(self.environment, "")
        return f"https://{self.storage_account_name}.{endpoint}"

    def container_url(self) -> str:
        return f"{self.resource_url()}/{self.container_name}"

    def blob_url(self, blob_id: str) -> str:
        """URL of a blob, with every ':' in its id replaced by the chunk delimiter."""
        blob_id = blob_id.replace(":", self.chunk_delimiter)
        return f"{self.container_url()}/{blob_id}"

    def download_timeout(self) -> float | None:
        """Overall timeout for a download including client retries, or None when unset."""
        if self.request_timeout <= 0:
            return None
        return (self.max_retries * self.request_timeout
                + (self.max_retries - 1) * self.max_retry_delay)