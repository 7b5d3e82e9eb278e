"""Transport wrapper that turns mutating GitHub requests into no-ops.

The wrapper sits below :class:`httpx.AsyncClient`, so callers keep a single
code path: in dry-run mode every non-read request is logged and answered
with a synthetic response instead of reaching GitHub.
"""

from __future__ import annotations

import httpx

from runnersync.logging import get_logger, log_info

logger = get_logger(__name__)

DRY_RUN_HEADER = "X-Runnersync-Dry-Run"
READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

# Mirrors what the request would have looked like had it failed upstream.
_SUPPRESSED_STATUS = 400


def is_suppressed(response: httpx.Response) -> bool:
    """Return True for synthetic responses produced by :class:`DryRunTransport`."""
    return response.headers.get(DRY_RUN_HEADER) == "true"


class DryRunTransport(httpx.AsyncBaseTransport):
    """Forward read requests and suppress everything else."""

    def __init__(self, wrapped: httpx.AsyncBaseTransport) -> None:
        """Wrap ``wrapped``, which receives every read request."""
        self._wrapped = wrapped

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send reads upstream; log and short-circuit writes."""
        if request.method in READ_METHODS:
            return await self._wrapped.handle_async_request(request)

        body = (await request.aread()).decode("utf-8", errors="replace")
        log_info(
            logger,
            "Dry run enabled: preventing non-GET request. The request would have "
            "been:",
        )
        log_info(logger, "%s %s: %s", request.method, request.url, body)
        return httpx.Response(
            _SUPPRESSED_STATUS,
            headers={DRY_RUN_HEADER: "true"},
            request=request,
        )

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._wrapped.aclose()
