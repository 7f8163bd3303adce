"""Parsing of Azure storage connection strings."""

from __future__ import annotations

from dataclasses import dataclass, field

_DEFAULT_SCHEME = "https"
_DEFAULT_SUFFIX = "core.windows.net"

_MALFORMED_MESSAGE = (
    "connection string is either blank or malformed. The expected connection string "
    "should contain key value pairs separated by semicolons. For example "
    "'DefaultEndpointsProtocol=https;AccountName=<accountName>;"
    "AccountKey=<accountKey>;EndpointSuffix=core.windows.net'"
)


class ConnectionStringError(ValueError):
    """Raised when a connection string is blank, malformed or incomplete."""


@dataclass(frozen=True)
class ParsedConnectionString:
    """The service URL, account name and account key held by a connection string."""

    service_url: str = ""
    account_name: str = ""
    account_key: str = field(default="", repr=False)


def _to_pairs(connection_string: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for part in connection_string.rstrip(";").split(";"):
        key, sep, value = part.partition("=")
        if not sep:
            raise ConnectionStringError(_MALFORMED_MESSAGE)
        pairs[key] = value
    return pairs


def parse_connection_string(connection_string: str) -> ParsedConnectionString:
    """Split a connection string into its service URL, account name and account key."""
    pairs = _to_pairs(connection_string)

    account_name = pairs.get("AccountName")
    if account_name is None:
        raise ConnectionStringError("connection string missing AccountName")

    account_key = pairs.get("AccountKey")
    if account_key is None:
        signature = pairs.get("SharedAccessSignature")
        if signature is None:
            raise ConnectionStringError(
                "connection string missing AccountKey and SharedAccessSignature"
            )
        return ParsedConnectionString(
            service_url=f"{_DEFAULT_SCHEME}://{account_name}.blob.{_DEFAULT_SUFFIX}/?{signature}"
        )

    blob_endpoint = pairs.get("BlobEndpoint")
    if blob_endpoint is not None:
        return ParsedConnectionString(
            service_url=blob_endpoint,
            account_name=account_name,
            account_key=account_key,
        )

    protocol = pairs.get("DefaultEndpointsProtocol", _DEFAULT_SCHEME)
    suffix = pairs.get("EndpointSuffix", _DEFAULT_SUFFIX)
    return ParsedConnectionString(
        service_url=f"{protocol}://{account_name}.blob.{suffix}",
        account_name=account_name,
        account_key=account_key,
    )