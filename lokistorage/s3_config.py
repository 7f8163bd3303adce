"""Configuration for an S3 object storage backend, including server-side encryption."""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass, field

SIGNATURE_VERSION_V4 = "v4"
SSE_KMS = "SSE-KMS"
SSE_S3 = "SSE-S3"
STORAGE_CLASS_STANDARD = "STANDARD"

SUPPORTED_SIGNATURE_VERSIONS = (SIGNATURE_VERSION_V4,)
SUPPORTED_SSE_TYPES = (SSE_KMS, SSE_S3)

_UNSUPPORTED_SIGNATURE_VERSION = "unsupported signature version"
_UNSUPPORTED_SSE_TYPE = "unsupported S3 SSE type"
_INVALID_SSE_CONTEXT = "invalid S3 SSE encryption context"

# Attribute name and flag suffix (after "<prefix>s3.") for each S3 option.
_S3_FLAG_NAMES = (
    ("access_key_id", "access-key-id"),
    ("secret_access_key", "secret-access-key"),
    ("session_token", "session-token"),
    ("bucket_name", "bucket-name"),
    ("region", "region"),
    ("endpoint", "endpoint"),
    ("insecure", "insecure"),
    ("disable_dualstack", "disable-dualstack"),
    ("signature_version", "signature-version"),
    ("storage_class", "storage-class"),
)


class S3ConfigError(ValueError):
    """Raised when an S3 configuration is invalid."""


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ("1", "t", "true"):
        return True
    if lowered in ("0", "f", "false"):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _dest(name: str) -> str:
    return name.replace(".", "_").replace("-", "_")


def _add_string(parser: argparse.ArgumentParser, name: str, default: str, help_text: str) -> None:
    parser.add_argument(f"-{name}", f"--{name}", dest=_dest(name), default=default, help=help_text)


def _add_bool(parser: argparse.ArgumentParser, name: str, default: bool, help_text: str) -> None:
    parser.add_argument(
        f"-{name}",
        f"--{name}",
        dest=_dest(name),
        nargs="?",
        const=True,
        default=default,
        type=_parse_bool,
        help=help_text,
    )


def _read(namespace: argparse.Namespace, name: str, fallback):
    return getattr(namespace, _dest(name), fallback)


def parse_kms_encryption_context(data: str) -> dict[str, str] | None:
    """Parse a JSON object of string pairs; an empty string yields None."""
    if data == "":
        return None
    try:
        decoded = json.loads(data)
    except json.JSONDecodeError as exc:
        raise S3ConfigError(f"unable to parse KMS encryption context: {exc}") from exc
    if decoded is None:
        return {}
    if not isinstance(decoded, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in decoded.items()
    ):
        raise S3ConfigError(
            "unable to parse KMS encryption context: expected an object of string values"
        )
    return decoded


@dataclass
class ThanosSSEConfig:
    """Server-side encryption settings in the shape the object store client expects."""

    type: str = ""
    kms_key_id: str = ""
    kms_encryption_context: dict[str, str] | None = None


@dataclass
class SSEConfig:
    """S3 server-side encryption as configured by the user."""

    type: str = ""
    kms_key_id: str = ""
    kms_encryption_context: str = ""

    def register_flags(self, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        _add_string(
            parser,
            prefix + "type",
            self.type,
            "Enable AWS Server Side Encryption. Supported values: "
            f"{', '.join(SUPPORTED_SSE_TYPES)}.",
        )
        _add_string(parser, prefix + "kms-key-id", self.kms_key_id,
                    "KMS Key ID used to encrypt objects in S3")
        _add_string(
            parser,
            prefix + "kms-encryption-context",
            self.kms_encryption_context,
            "KMS Encryption Context used for object encryption. It expects JSON formatted string.",
        )

    def update_from_flags(self, namespace: argparse.Namespace, prefix: str = "") -> None:
        self.type = _read(namespace, prefix + "type", self.type)
        self.kms_key_id = _read(namespace, prefix + "kms-key-id", self.kms_key_id)
        self.kms_encryption_context = _read(
            namespace, prefix + "kms-encryption-context", self.kms_encryption_context
        )

    def validate(self) -> None:
        if self.type != "" and self.type not in SUPPORTED_SSE_TYPES:
            raise S3ConfigError(_UNSUPPORTED_SSE_TYPE)
        try:
            parse_kms_encryption_context(self.kms_encryption_context)
        except S3ConfigError as exc:
            raise S3ConfigError(_INVALID_SSE_CONTEXT) from exc

    def build_thanos_config(self) -> ThanosSSEConfig:
        if self.type == "":
            return ThanosSSEConfig()
        if self.type == SSE_KMS:
            return ThanosSSEConfig(
                type=SSE_KMS,
                kms_key_id=self.kms_key_id,
                kms_encryption_context=parse_kms_encryption_context(self.kms_encryption_context),
            )
        if self.type == SSE_S3:
            return ThanosSSEConfig(type=SSE_S3)
        raise S3ConfigError(_UNSUPPORTED_SSE_TYPE)


@dataclass
class S3Config:
    """Options for an S3 storage backend."""

    endpoint: str = ""
    region: str = ""
    bucket_name: str = ""
    secret_access_key: str = field(default="", repr=False)
    session_token: str = field(default="", repr=False)
    access_key_id: str = ""
    insecure: bool = False
    disable_dualstack: bool = False
    signature_version: str = SIGNATURE_VERSION_V4
    storage_class: str = STORAGE_CLASS_STANDARD
    sse: SSEConfig = field(default_factory=SSEConfig)

    def register_flags(self, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        p = prefix + "s3."
        _add_string(parser, p + "access-key-id", self.access_key_id, "S3 access key ID")
        _add_string(parser, p + "secret-access-key", self.secret_access_key, "S3 secret access key")
        _add_string(parser, p + "session-token", self.session_token, "S3 session token")
        _add_string(parser, p + "bucket-name", self.bucket_name, "S3 bucket name")
        _add_string(
            parser,
            p + "region",
            self.region,
            "S3 region. If unset, the client will issue a S3 GetBucketLocation API call to autodetect it.",
        )
        _add_string(
            parser,
            p + "endpoint",
            self.endpoint,
            "The S3 bucket endpoint: an AWS S3 endpoint or the address of an "
            "S3-compatible service in hostname:port format.",
        )
        _add_bool(parser, p + "insecure", self.insecure,
                  "If enabled, use http:// for the S3 endpoint instead of https://.")
        _add_bool(parser, p + "disable-dualstack", self.disable_dualstack,
                  "Disable forcing S3 dualstack endpoint usage.")
        _add_string(
            parser,
            p + "signature-version",
            self.signature_version,
            "The signature version to use for authenticating against S3. Supported values are: "
            f"{', '.join(SUPPORTED_SIGNATURE_VERSIONS)}.",
        )
        _add_string(parser, p + "storage-class", self.storage_class,
                    "The S3 storage class to use.")
        self.sse.register_flags(parser, p + "sse.")

    def update_from_flags(self, namespace: argparse.Namespace, prefix: str = "") -> None:
        p = prefix + "s3."
        for attribute, flag_name in _S3_FLAG_NAMES:
            setattr(self, attribute, _read(namespace, p + flag_name, getattr(self, attribute)))
        self.sse.update_from_flags(namespace, p + "sse.")

    def validate(self) -> None:
        if self.signature_version not in SUPPORTED_SIGNATURE_VERSIONS:
            raise S3ConfigError(_UNSUPPORTED_SIGNATURE_VERSION)
        self.sse.validate()