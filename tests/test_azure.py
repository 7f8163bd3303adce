import argparse

import pytest

from lokistorage.azure import AzureConfigError, BlobStorageConfig


def _parse(args, prefix=""):
    cfg = BlobStorageConfig()
    parser = argparse.ArgumentParser()
    cfg.register_flags(parser, prefix)
    cfg.update_from_flags(parser.parse_args(args), prefix)
    return cfg


def test_flag_defaults_match_dataclass_defaults():
    assert _parse([]) == BlobStorageConfig()


def test_flag_defaults_pinned():
    cfg = _parse([])
    assert cfg.environment == "AzureGlobal"
    assert cfg.container_name == "loki"
    assert cfg.chunk_delimiter == "-"
    assert cfg.download_buffer_size == 512000
    assert cfg.upload_buffer_size == 256000


def test_flags_override_values():
    cfg = _parse([
        "-common.storage.azure.account-name", "acct",
        "-common.storage.azure.request-timeout", "45s",
        "-common.storage.azure.use-managed-identity",
        "-common.storage.azure.download-buffer-count", "3",
    ], prefix="common.storage.")
    assert cfg.storage_account_name == "acct"
    assert cfg.request_timeout == 45.0
    assert cfg.use_managed_identity is True
    assert cfg.upload_buffer_count == 3


def test_validate_accepts_defaults():
    cfg = BlobStorageConfig()
    cfg.validate()
    assert cfg.environment == "AzureGlobal"


def test_validate_rejects_unknown_environment():
    with pytest.raises(AzureConfigError, match="unsupported Azure blob storage environment: Mars"):
        BlobStorageConfig(environment="Mars").validate()


def test_validate_public_cloud_not_in_supported_list():
    with pytest.raises(AzureConfigError):
        BlobStorageConfig(environment="AzurePublicCloud").validate()


@pytest.mark.parametrize(
    "missing, blank",
    [
        ("tenant_id", " "),
        ("client_id", ""),
        ("client_secret", "  "),
    ],
)
def test_validate_service_principal_requirements(missing, blank):
    kwargs = {"tenant_id": "t", "client_id": "id", "client_secret": "secret"}
    kwargs[missing] = blank
    cfg = BlobStorageConfig(use_service_principal=True, **kwargs)
    with pytest.raises(AzureConfigError, match=f"^{missing} is required"):
        cfg.validate()


def test_resource_url_uses_default_endpoint():
    cfg = BlobStorageConfig(storage_account_name="acct")
    assert cfg.resource_url() == "https://acct.blob.core.windows.net"


def test_resource_url_china_cloud():
    cfg = BlobStorageConfig(storage_account_name="acct", environment="AzureChinaCloud")
    assert cfg.resource_url() == "https://acct.blob.core.chinacloudapi.cn"


def test_resource_url_endpoint_suffix_wins():
    cfg = BlobStorageConfig(storage_account_name="acct", endpoint_suffix="custom.local")
    assert cfg.resource_url() == "https://acct.custom.local"


def test_resource_url_from_connection_string_blob_endpoint():
    endpoint = "http://127.0.0.1:10000/devstore"
    cfg = BlobStorageConfig(
        storage_account_name="ignored",
        connection_string=f"AccountName=devstore;AccountKey=secret;BlobEndpoint={endpoint}",
    )
    assert cfg.resource_url() == endpoint


def test_resource_url_malformed_connection_string_is_empty():
    cfg = BlobStorageConfig(connection_string="garbage")
    assert cfg.resource_url() == ""


def test_container_and_blob_urls():
    cfg = BlobStorageConfig(storage_account_name="acct", container_name="chunks")
    assert cfg.container_url() == cfg.resource_url() + "/chunks"
    assert cfg.blob_url("tenant/abc:def:1") == cfg.container_url() + "/tenant/abc-def-1"


def test_blob_url_custom_delimiter():
    cfg = BlobStorageConfig(storage_account_name="acct", chunk_delimiter="_")
    assert cfg.blob_url("a:b").endswith("/loki/a_b")


def test_download_timeout_disabled_when_zero():
    assert BlobStorageConfig(request_timeout=0).download_timeout() is None


def test_download_timeout_single_try_equals_request_timeout():
    cfg = BlobStorageConfig(request_timeout=7.0, max_retries=1, max_retry_delay=3.0)
    assert cfg.download_timeout() == 7.0


def test_download_timeout_grows_with_retries():
    fewer = BlobStorageConfig(max_retries=2).download_timeout()
    more = BlobStorageConfig(max_retries=3).download_timeout()
    assert more > fewer >= 2 * BlobStorageConfig().request_timeout