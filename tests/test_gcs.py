import argparse
import asyncio
import errno

import pytest

from lokistorage.gcs import (
    GCSConfig,
    GoogleAPIError,
    is_retryable_error,
    is_storage_throttled_error,
    is_storage_timeout_error,
)


def _parse(args, prefix=""):
    parser = argparse.ArgumentParser()
    cfg = GCSConfig()
    cfg.register_flags(parser, prefix)
    cfg.update_from_flags(parser.parse_args(args), prefix)
    return cfg


def test_flag_defaults_match_dataclass_defaults():
    cfg = _parse([])
    assert cfg == GCSConfig()
    assert cfg.enable_opencensus is True
    assert cfg.enable_http2 is True
    assert cfg.enable_retries is True
    assert cfg.chunk_buffer_size == 0
    assert cfg.request_timeout == 0.0


def test_flags_with_prefix_are_applied():
    cfg = _parse(
        [
            "--common.storage.gcs.bucketname", "chunks",
            "--common.storage.gcs.chunk-buffer-size", "1024",
            "--common.storage.gcs.enable-http2=false",
            "--common.storage.gcs.request-timeout", "1m30s",
        ],
        prefix="common.storage.",
    )
    assert cfg.bucket_name == "chunks"
    assert cfg.chunk_buffer_size == 1024
    assert cfg.enable_http2 is False
    assert cfg.request_timeout == pytest.approx(90.0)


def test_duration_in_milliseconds():
    cfg = _parse(["--gcs.request-timeout", "250ms"])
    assert cfg.request_timeout == pytest.approx(0.25)


def test_invalid_duration_is_rejected():
    with pytest.raises(SystemExit):
        _parse(["--gcs.request-timeout", "ten"])


def test_service_account_hidden_from_repr():
    cfg = GCSConfig(service_account="secret")
    assert "secret" not in repr(cfg)


def test_google_api_timeout_codes():
    assert is_storage_timeout_error(GoogleAPIError(408))
    assert is_storage_timeout_error(GoogleAPIError(504))
    assert not is_storage_timeout_error(GoogleAPIError(404))


def test_google_api_throttled_codes():
    assert is_storage_throttled_error(GoogleAPIError(429))
    assert is_storage_throttled_error(GoogleAPIError(500))
    assert is_storage_throttled_error(GoogleAPIError(503))
    assert not is_storage_throttled_error(GoogleAPIError(404))
    assert not is_storage_throttled_error(TimeoutError())


def test_connection_refused_and_closed_are_not_retryable():
    assert not is_storage_timeout_error(ConnectionRefusedError(errno.ECONNREFUSED, "refused"))
    assert not is_storage_timeout_error(OSError(errno.EBADF, "closed"))
    assert not is_retryable_error(ConnectionRefusedError())


def test_network_timeout_and_reset_are_timeouts():
    assert is_storage_timeout_error(TimeoutError("timed out"))
    assert is_storage_timeout_error(ConnectionResetError())
    assert is_storage_timeout_error(EOFError())


def test_wrapped_timeout_is_found_through_cause():
    try:
        try:
            raise TimeoutError("read timed out")
        except TimeoutError as inner:
            raise RuntimeError("fetch failed") from inner
    except RuntimeError as outer:
        assert is_storage_timeout_error(outer)


def test_cancellation_counts_only_with_client_timeout():
    assert not is_storage_timeout_error(asyncio.CancelledError("canceled"))
    assert is_storage_timeout_error(
        asyncio.CancelledError("Client.Timeout exceeded while awaiting headers")
    )


def test_unrelated_error_is_not_retryable():
    assert not is_retryable_error(ValueError("bad"))


def test_retryable_combines_both():
    assert is_retryable_error(GoogleAPIError(429))
    assert is_retryable_error(GoogleAPIError(408))
    assert is_retryable_error(ConnectionResetError())


def test_google_api_error_keeps_code_and_message():
    err = GoogleAPIError(503, "backend unavailable")
    assert err.code == 503
    assert err.message == "backend unavailable"
    assert "backend unavailable" in str(err)