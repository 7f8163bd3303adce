# lokistorage

Configuration models, validation and small helpers for the object-storage
backends of a log aggregation system (Amazon S3, Google Cloud Storage and
Azure Blob Storage), plus a few related utilities.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `lokistorage.s3_config`: `S3Config` and `SSEConfig`. Both register
  command-line flags on an `argparse.ArgumentParser` (`register_flags`) and
  read them back from the parsed namespace (`update_from_flags`).
  `S3Config.validate` checks the signature version (only `v4` is supported)
  and the server-side encryption settings; `SSEConfig.validate` accepts an
  empty type, `SSE-KMS` or `SSE-S3` and a KMS encryption context that is
  empty or a JSON object of strings. `SSEConfig.build_thanos_config` returns a
  `ThanosSSEConfig`. `parse_kms_encryption_context` parses the JSON context
  (an empty string gives `None`). Problems raise `S3ConfigError`.
- `lokistorage.gcs`: `GCSConfig` with its flags (durations such as `30s` or
  `1m30s` are read as seconds), and the error classifiers
  `is_storage_timeout_error`, `is_storage_throttled_error` and
  `is_retryable_error`. `GoogleAPIError` carries an HTTP status code; 408
  and 504 count as timeouts, 429 and every 5xx as throttling. Timeouts,
  connection resets and `EOFError` anywhere in an exception's chain count as
  retryable; refused or closed connections do not.
- `lokistorage.azure_connstr`: `parse_connection_string` turns an Azure
  storage connection string into a `ParsedConnectionString` (service URL,
  account name, account key). It honours `DefaultEndpointsProtocol`,
  `EndpointSuffix`, `BlobEndpoint` and `SharedAccessSignature`, and raises
  `ConnectionStringError` when the string is malformed or incomplete.
- `lokistorage.azure`: `BlobStorageConfig` with flags, `validate` (raising
  `AzureConfigError` for an unknown environment or missing service-principal
  settings), URL building through `resource_url`, `container_url` and
  `blob_url` (which replaces `:` in blob ids with the chunk delimiter), and
  `download_timeout`, the overall timeout including the client's retries.
- `lokistorage.tokenizer`: `StructuredMetadataTokenizer(prefix).tokens(name, value)`
  yields the name, value and `name=value`, each plain and with the prefix.
- `lokistorage.yamlcompare`: `compare_yaml(a, b)` tells whether two values
  (dataclasses, dicts, lists, scalars) serialise to identical YAML, and
  returns `False` if either cannot be serialised.
- `lokistorage.helm`: `construct_helm_values(read_replicas, write_replicas,
  read_pod, write_pod)` builds `HelmValues` from two `PodResources`;
  `HelmValues.to_dict` gives the values document with `loki`, `read` and
  `write` keys.
- `lokistorage.common`: `CommonConfig`, `StorageConfig` and
  `FilesystemConfig`. `CommonConfig.register_flags` adds the S3, GCS, Azure
  and filesystem flags under the `common.storage.` prefix and the
  `common.compactor-address` and `common.compactor-grpc-address` flags.

## Example

```python
import argparse

from lokistorage.s3_config import S3Config
from lokistorage.azure_connstr import parse_connection_string

parser = argparse.ArgumentParser()
cfg = S3Config()
cfg.register_flags(parser, "")
namespace = parser.parse_args(["--s3.bucket-name", "logs"])
cfg.update_from_flags(namespace, "")
cfg.validate()

parsed = parse_connection_string(
    "AccountName=devaccount;AccountKey=placeholder;EndpointSuffix=core.windows.net"
)
print(parsed.service_url)  # https://devaccount.blob.core.windows.net
```

## What it does not do

This package only models and checks settings. It has no storage clients: it
does not connect to S3, GCS or Azure, and it does not upload, download, list
or delete objects. It provides no command-line program and no server; the
flag helpers are meant to be attached to a parser of your own.