"""Configuration and error classification for a Google Cloud Storage backend."""

from __future__ import annotations

import argparse
import asyncio
import concurrent.futures
import errno
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from lokistorage.s3_config import _add_bool, _add_string, _dest, _read

_CONTEXT_ERRORS = (asyncio.CancelledError, concurrent.futures.CancelledError)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class GoogleAPIError(Exception):
    """An error response returned by a Google API, carrying its HTTP status code."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(f"googleapi: Error {code}: {message}")
        self.code = code
        self.message = message


def _parse_duration(text: str) -> float:
    """Parse a duration such as "1m30s" or "250ms" into seconds."""
    raw = text.strip()
    sign = 1.0
    if raw[:1] in ("+", "-"):
        sign = -1.0 if raw[0] == "-" else 1.0
        raw = raw[1:]
    if raw == "0":
        return 0.0
    if raw == "":
        raise argparse.ArgumentTypeError(f"invalid duration: {text!r}")
    total = 0.0
    pos = 0
    while pos < len(raw):
        match = _DURATION_PART.match(raw, pos)
        if match is None:
            raise argparse.ArgumentTypeError(f"invalid duration: {text!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return sign * total


@dataclass
class GCSConfig:
    """Options for the GCS chunk client."""

    bucket_name: str = ""
    service_account: str = field(default="", repr=False)
    chunk_buffer_size: int = 0
    request_timeout: float = 0.0
    enable_opencensus: bool = True
    enable_http2: bool = True
    enable_retries: bool = True
    insecure: bool = False

    def register_flags(self, parser: argparse.ArgumentParser, prefix: str = "") -> None:
        p = prefix + "gcs."
        _add_string(
            parser,
            p + "bucketname",
            self.bucket_name,
            "Name of GCS bucket.",
        )
        _add_string(
            parser,
            p + "service-account",
            self.service_account,
            "Service account key content in JSON format.",
        )
        name = p + "chunk-buffer-size"
        parser.add_argument(
            f"-{name}",
            f"--{name}",
            dest=_dest(name),
            type=int,
            default=self.chunk_buffer_size,
            help="The size of the buffer that GCS client for each PUT request. 0 to disable buffering.",
        )
        name = p + "request-timeout"
        parser.add_argument(
            f"-{name}",
            f"--{name}",
            dest=_dest(name),
            type=_parse_duration,
            default=self.request_timeout,
            help="The duration after which the requests to GCS should be timed out.",
        )
        _add_bool(parser, p + "enable-opencensus", self.enable_opencensus,
                  "Enable OpenCensus (OC) instrumentation for all requests.")
        _add_bool(parser, p + "enable-http2", self.enable_http2, "Enable HTTP2 connections.")
        _add_bool(parser, p + "enable-retries", self.enable_retries,
                  "Enable automatic retries of failed idempotent requests.")

    def update_from_flags(self, namespace: argparse.Namespace, prefix: str = "") -> None:
        p = prefix + "gcs."
        self.bucket_name = _read(namespace, p + "bucketname", self.bucket_name)
        self.service_account = _read(namespace, p + "service-account", self.service_account)
        self.chunk_buffer_size = _read(namespace, p + "chunk-buffer-size", self.chunk_buffer_size)
        self.request_timeout = _read(namespace, p + "request-timeout", self.request_timeout)
        self.enable_opencensus = _read(namespace, p + "enable-opencensus", self.enable_opencensus)
        self.enable_http2 = _read(namespace, p + "enable-http2", self.enable_http2)
        self.enable_retries = _read(namespace, p + "enable-retries", self.enable_retries)


def _chain(err: BaseException) -> Iterator[BaseException]:
    """Yield err and every exception it was raised from or during."""
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _any_in_chain(err: BaseException, predicate) -> bool:
    return any(predicate(e) for e in _chain(err))


def _is_context_error(e: BaseException) -> bool:
    return isinstance(e, _CONTEXT_ERRORS)


def _is_closed_connection(e: BaseException) -> bool:
    return isinstance(e, OSError) and e.errno == errno.EBADF


def _is_connection_refused(e: BaseException) -> bool:
    return isinstance(e, ConnectionRefusedError) or (
        isinstance(e, OSError) and e.errno == errno.ECONNREFUSED
    )


def _is_timeout(e: BaseException) -> bool:
    return isinstance(e, TimeoutError)


def _is_connection_reset(e: BaseException) -> bool:
    return isinstance(e, ConnectionResetError) or (
        isinstance(e, OSError) and e.errno == errno.ECONNRESET
    )


def is_storage_timeout_error(err: BaseException) -> bool:
    """Whether err means the object cannot be fetched now because of a server-side timeout."""
    if _any_in_chain(err, _is_context_error):
        # A cancellation caused by the client's own header timeout is a server-side timeout.
        return "Client.Timeout" in str(err)

    if _any_in_chain(err, _is_closed_connection) or _any_in_chain(err, _is_connection_refused):
        return False

    if _any_in_chain(err, _is_timeout):
        return True

    if _any_in_chain(err, lambda e: isinstance(e, EOFError)) or _any_in_chain(
        err, _is_connection_reset
    ):
        return True

    if isinstance(err, GoogleAPIError):
        return err.code in (408, 504)

    return False


def is_storage_throttled_error(err: BaseException) -> bool:
    """Whether err means the request was throttled or hit a retryable server error."""
    if isinstance(err, GoogleAPIError):
        return err.code == 429 or err.code // 100 == 5
    return False


def is_retryable_error(err: BaseException) -> bool:
    """Whether the request failed for a retryable server-side reason."""
    return is_storage_timeout_error(err) or is_storage_throttled_error(err)