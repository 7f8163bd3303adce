"""Configuration shared between several sections: storage, paths and addresses."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from lokistorage.azure import BlobStorageConfig
from lokistorage.gcs import GCSConfig
from lokistorage.s3_config import S3Config, _add_string, _read

_COMMON_STORAGE_PREFIX = "common.storage."
_FALLBACK_INTERFACES = ("eth0", "en0")


@dataclass
class FilesystemConfig:
    """Directories for chunks and rules on a local filesystem."""

    chunks_directory: str = ""
    rules_directory: str = ""

    def register_flags(self, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        _add_string(parser, prefix + "filesystem.chunk-directory", self.chunks_directory,
                    "Directory to store chunks in.")
        _add_string(parser, prefix + "filesystem.rules-directory", self.rules_directory,
                    "Directory to store rules in.")

    def update_from_flags(self, namespace: argparse.Namespace, prefix: str = "") -> None:
        self.chunks_directory = _read(namespace, prefix + "filesystem.chunk-directory",
                                      self.chunks_directory)
        self.rules_directory = _read(namespace, prefix + "filesystem.rules-directory",
                                     self.rules_directory)


@dataclass
class StorageConfig:
    """Object storage backends that may be configured once for every component."""

    s3: S3Config = field(default_factory=S3Config)
    gcs: GCSConfig = field(default_factory=GCSConfig)
    azure: BlobStorageConfig = field(default_factory=BlobStorageConfig)
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)

    def register_flags(self, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        self.s3.register_flags(parser, prefix)
        self.gcs.register_flags(parser, prefix)
        self.azure.register_flags(parser, prefix)
        self.filesystem.register_flags(parser, prefix)

    def update_from_flags(self, namespace: argparse.Namespace, prefix: str = "") -> None:
        self.s3.update_from_flags(namespace, prefix)
        self.gcs.update_from_flags(namespace, prefix)
        self.azure.update_from_flags(namespace, prefix)
        self.filesystem.update_from_flags(namespace, prefix)


@dataclass
class CommonConfig:
    """Settings that more specific sections fall back to when they leave them unset."""

    path_prefix: str = ""
    storage: StorageConfig = field(default_factory=StorageConfig)
    persist_tokens: bool = False
    replication_factor: int = 3
    instance_interface_names: list[str] = field(
        default_factory=lambda: list(_FALLBACK_INTERFACES)
    )
    instance_addr: str = ""
    compactor_address: str = ""
    compactor_grpc_address: str = ""

    def register_flags(self, parser: argparse.ArgumentParser) -> None:
        """Register the command-line flags of the common section.

        Replication factor, instance address and interface names only take
        their defaults here; they are set through the configuration file.
        """
        self.storage.register_flags(parser, _COMMON_STORAGE_PREFIX)
        _add_string(parser, "common.compactor-address", self.compactor_address,
                    "the http address of the compactor in the form http://host:port")
        _add_string(parser, "common.compactor-grpc-address", self.compactor_grpc_address,
                    "the grpc address of the compactor in the form host:port")

    def update_from_flags(self, namespace: argparse.Namespace) -> None:
        self.storage.update_from_flags(namespace, _COMMON_STORAGE_PREFIX)
        self.compactor_address = _read(namespace, "common.compactor-address",
                                       self.compactor_address)
        self.compactor_grpc_address = _read(namespace, "common.compactor-grpc-address",
                                            self.compactor_grpc_address)