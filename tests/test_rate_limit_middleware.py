"""Behavior-focused tests for rate limiting middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from dorm_presence.adapters.web.rate_limit_middleware import (
    RateLimitMiddleware,
    extract_client_ip,
    extract_retry_after,
)


def make_request(host: str | None = "192.168.1.1", path: str = "/api/rfid-logs") -> MagicMock:
    """Create a request mock from a direct client."""
    request = MagicMock()
    request.headers = {}
    request.url.path = path
    if host is None:
        request.client = None
    else:
        request.client = MagicMock()
        request.client.host = host
    return request


class TestExtractClientIp:
    """Tests for client IP extraction behavior."""

    def test_when_x_forwarded_for_has_chain_then_returns_first_ip(self) -> None:
        """Given X-Forwarded-For with IP chain, when extracting, then returns original client IP."""
        request = make_request(None)
        request.headers = {"X-Forwarded-For": "  203.0.113.50 , 70.41.3.18, 150.172.238.178"}

        assert extract_client_ip(request) == "203.0.113.50"

    def test_when_x_forwarded_for_empty_then_uses_direct_client_ip(self) -> None:
        """Given empty X-Forwarded-For, when extracting, then falls back to direct IP."""
        request = make_request("192.168.1.100")
        request.headers = {"X-Forwarded-For": ""}

        assert extract_client_ip(request) == "192.168.1.100"

    def test_when_no_client_info_available_then_returns_unknown(self) -> None:
        """Given no client information, when extracting, then returns 'unknown'."""
        assert extract_client_ip(make_request(None)) == "unknown"


class TestExtractRetryAfter:
    """Tests for retry_after extraction from rate limit results."""

    def test_when_result_has_state_with_retry_after_then_extracts_it(self) -> None:
        """Given result with state.retry_after, when extracting, then returns that value."""
        result = MagicMock()
        result.state.retry_after = 45.5

        assert extract_retry_after(result) == 45.5

    def test_when_result_has_direct_retry_after_then_extracts_it(self) -> None:
        """Given result with direct retry_after, when extracting, then returns that value."""
        result = MagicMock(spec=["retry_after"])
        result.retry_after = 30.0

        assert extract_retry_after(result) == 30.0

    def test_when_result_has_no_retry_after_then_returns_default(self) -> None:
        """Given result without retry_after, when extracting, then returns 60 seconds default."""
        assert extract_retry_after(MagicMock(spec=[])) == 60.0


class TestRateLimitMiddlewareDispatch:
    """Tests for rate limit middleware dispatch behavior."""

    @pytest.mark.asyncio
    async def test_when_within_limit_then_requests_pass_through(self) -> None:
        """Given requests within the limit, when processing, then they pass through."""
        middleware = RateLimitMiddleware(app=MagicMock(), requests_per_minute=10)
        request = make_request()
        expected_response = MagicMock()
        call_next = AsyncMock(return_value=expected_response)

        response = await middleware.dispatch(request, call_next)

        assert response == expected_response
        call_next.assert_called_once_with(request)

    @pytest.mark.asyncio
    async def test_when_exceeding_limit_then_returns_429(self) -> None:
        """Given a client over the limit, when processing, then returns 429 with Retry-After."""
        middleware = RateLimitMiddleware(app=MagicMock(), requests_per_minute=1)
        request = make_request()
        call_next = AsyncMock(return_value=MagicMock())

        await middleware.dispatch(request, call_next)
        response = await middleware.dispatch(request, call_next)

        assert response.status_code == 429
        assert "Retry-After" in response.headers
        assert b"Rate limit exceeded" in response.body
        assert call_next.call_count == 1

    @pytest.mark.asyncio
    async def test_clients_are_limited_separately(self) -> None:
        """Given one client over the limit, when another client calls, then it passes."""
        middleware = RateLimitMiddleware(app=MagicMock(), requests_per_minute=1)
        call_next = AsyncMock(return_value=MagicMock())

        await middleware.dispatch(make_request("10.0.0.1"), call_next)
        await middleware.dispatch(make_request("10.0.0.1"), call_next)
        await middleware.dispatch(make_request("10.0.0.2"), call_next)

        assert call_next.call_count == 2

    @pytest.mark.asyncio
    async def test_health_check_is_never_limited(self) -> None:
        """Given many health checks, when processing, then all pass through."""
        middleware = RateLimitMiddleware(app=MagicMock(), requests_per_minute=1)
        call_next = AsyncMock(return_value=MagicMock())

        for _ in range(5):
            await middleware.dispatch(make_request(path="/healthz"), call_next)

        assert call_next.call_count == 5
