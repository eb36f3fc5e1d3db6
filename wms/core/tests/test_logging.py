"""Tests for logging configuration and correlation."""

import pytest

from wms.core.logging import (
    add_correlation,
    configure_logging,
    get_logger,
    profile_id_ctx,
    request_id_ctx,
)


@pytest.fixture
def correlated():
    request_token = request_id_ctx.set("req-1")
    actor_token = profile_id_ctx.set(7)
    yield
    profile_id_ctx.reset(actor_token)
    request_id_ctx.reset(request_token)


def test_get_logger_returns_bound_logger():
    configure_logging()
    logger = get_logger("test")

    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")


def test_context_is_empty_outside_requests():
    assert add_correlation(None, "info", {"event": "x"}) == {"event": "x"}


class TestAddCorrelation:
    def test_stamps_request_and_actor(self, correlated) -> None:
        event = add_correlation(None, "info", {"event": "x"})

        assert event == {"event": "x", "request_id": "req-1", "actor_id": 7}

    def test_explicit_actor_wins(self, correlated) -> None:
        event = add_correlation(None, "info", {"event": "x", "actor_id": 3})

        assert event["actor_id"] == 3
