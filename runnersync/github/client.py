"""GitHub REST client for organization repositories and runner groups."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import os
import typing as typ
from urllib.parse import quote

import httpx

from runnersync.logging import get_logger, log_debug

from .dry_run import DryRunTransport, is_suppressed
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import SELECTED_VISIBILITY, Repository, RunnerGroup

logger = get_logger(__name__)


class RunnerGroupClient(typ.Protocol):
    """Remote operations the reconciler relies on."""

    async def list_org_repositories(
        self, org: str, *, repo_type: str = "all"
    ) -> tuple[Repository, ...]:
        """Return every organization repository of the given type."""
        ...

    async def list_runner_groups(self, org: str) -> tuple[RunnerGroup, ...]:
        """Return the organization's self-hosted runner groups."""
        ...

    async def get_group_repository_ids(self, org: str, group_id: int) -> list[int]:
        """Return the IDs of repositories currently assigned to a group."""
        ...

    async def set_group_repositories(
        self, org: str, group_id: int, repository_ids: cabc.Sequence[int]
    ) -> None:
        """Replace the repositories assigned to a group."""
        ...

    async def create_group(
        self,
        org: str,
        name: str,
        repository_ids: cabc.Sequence[int],
        *,
        visibility: str = SELECTED_VISIBILITY,
    ) -> None:
        """Create a runner group with the given repositories."""
        ...


DEFAULT_BASE_URL = "https://api.github.com"


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 20.0
    user_agent: str = "runnersync/0.1"
    api_version: str = "2022-11-28"
    per_page: int = 100

    @classmethod
    def from_env(
        cls, environ: cabc.Mapping[str, str] | None = None
    ) -> GitHubRestConfig:
        """Build configuration from the token environment variables.

        ``RUNNERSYNC_GITHUB_TOKEN`` wins over ``GITHUB_TOKEN``; ``GITHUB_API_URL``
        selects a GitHub Enterprise Server endpoint when set.
        """
        env = os.environ if environ is None else environ
        token = (
            env.get("RUNNERSYNC_GITHUB_TOKEN", "").strip()
            or env.get("GITHUB_TOKEN", "").strip()
        )
        if not token:
            raise GitHubConfigError.missing_token()
        base_url = env.get("GITHUB_API_URL", "").strip() or DEFAULT_BASE_URL
        return cls(token=token, base_url=base_url)


_HTTP_ERROR_STATUS_THRESHOLD = 400


def build_http_client(
    config: GitHubRestConfig,
    *,
    dry_run: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the HTTP client, wrapping the transport when ``dry_run`` is set."""
    if not config.token.strip():
        raise GitHubConfigError.empty_token()

    base_transport = transport or httpx.AsyncHTTPTransport()
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=config.timeout_s,
        transport=DryRunTransport(base_transport) if dry_run else base_transport,
        headers={
            "Authorization": f"Bearer {config.token}",
            "User-Agent": config.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": config.api_version,
        },
    )


def _require_int(item: cabc.Mapping[str, typ.Any], key: str, *, field: str) -> int:
    value = item.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise GitHubResponseShapeError.missing(f"{field}.{key}")
    return value


def _require_str(item: cabc.Mapping[str, typ.Any], key: str, *, field: str) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise GitHubResponseShapeError.missing(f"{field}.{key}")
    return value


def _repository_from_item(item: cabc.Mapping[str, typ.Any]) -> Repository:
    return Repository(
        id=_require_int(item, "id", field="repository"),
        name=_require_str(item, "name", field="repository"),
    )


def _runner_group_from_item(item: cabc.Mapping[str, typ.Any]) -> RunnerGroup:
    return RunnerGroup(
        id=_require_int(item, "id", field="runner_group"),
        name=_require_str(item, "name", field="runner_group"),
        visibility=_require_str(item, "visibility", field="runner_group"),
    )


def _page_items(
    payload: object, *, items_key: str | None, field: str
) -> list[dict[str, typ.Any]]:
    """Extract the list of objects from one page of a listing response."""
    if items_key is not None:
        if not isinstance(payload, dict):
            raise GitHubResponseShapeError.missing(field)
        payload = payload.get(items_key)
    if not isinstance(payload, list):
        raise GitHubResponseShapeError.missing(field)
    for item in payload:
        if not isinstance(item, dict):
            raise GitHubResponseShapeError.unexpected_item(field, item)
    return payload


def _next_page_url(response: httpx.Response) -> str | None:
    """Return the ``rel="next"`` link, or None on the last page."""
    link = response.links.get("next")
    if not link:
        return None
    url = link.get("url")
    return url if isinstance(url, str) and url else None


class GitHubRestClient:
    """GitHub REST implementation of :class:`RunnerGroupClient`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialise the client, building an HTTP client unless one is given."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or build_http_client(config, dry_run=dry_run)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def list_org_repositories(
        self, org: str, *, repo_type: str = "all"
    ) -> tuple[Repository, ...]:
        """Return every organization repository of ``repo_type``."""
        path = f"/orgs/{quote(org, safe='')}/repos"
        items = self._paginate(
            path, params={"type": repo_type}, items_key=None, field="repositories"
        )
        return tuple([_repository_from_item(item) async for item in items])

    async def list_runner_groups(self, org: str) -> tuple[RunnerGroup, ...]:
        """Return the organization's self-hosted runner groups."""
        path = f"/orgs/{quote(org, safe='')}/actions/runner-groups"
        items = self._paginate(
            path, params={}, items_key="runner_groups", field="runner_groups"
        )
        return tuple([_runner_group_from_item(item) async for item in items])

    async def get_group_repository_ids(self, org: str, group_id: int) -> list[int]:
        """Return the IDs of repositories currently assigned to ``group_id``."""
        items = self._paginate(
            self._group_repositories_path(org, group_id),
            params={},
            items_key="repositories",
            field="repositories",
        )
        return [_repository_from_item(item).id async for item in items]

    async def set_group_repositories(
        self, org: str, group_id: int, repository_ids: cabc.Sequence[int]
    ) -> None:
        """Replace the repositories assigned to ``group_id``."""
        await self._request(
            "PUT",
            self._group_repositories_path(org, group_id),
            json={"selected_repository_ids": list(repository_ids)},
        )

    async def create_group(
        self,
        org: str,
        name: str,
        repository_ids: cabc.Sequence[int],
        *,
        visibility: str = SELECTED_VISIBILITY,
    ) -> None:
        """Create runner group ``name`` limited to ``repository_ids``."""
        await self._request(
            "POST",
            f"/orgs/{quote(org, safe='')}/actions/runner-groups",
            json={
                "name": name,
                "visibility": visibility,
                "selected_repository_ids": list(repository_ids),
            },
        )

    @staticmethod
    def _group_repositories_path(org: str, group_id: int) -> str:
        org_path = quote(org, safe="")
        return f"/orgs/{org_path}/actions/runner-groups/{group_id}/repositories"

    async def _paginate(
        self,
        path: str,
        *,
        params: dict[str, str],
        items_key: str | None,
        field: str,
    ) -> typ.AsyncIterator[dict[str, typ.Any]]:
        """Yield listing items across every page linked from ``path``."""
        url: str | None = path
        page_params: dict[str, str] | None = {
            **params,
            "per_page": str(self._config.per_page),
        }
        while url is not None:
            response = await self._request("GET", url, params=page_params)
            try:
                payload = response.json()
            except ValueError as exc:
                raise GitHubResponseShapeError.not_json(field) from exc
            for item in _page_items(payload, items_key=items_key, field=field):
                yield item
            # The next link already carries the query string.
            url, page_params = _next_page_url(response), None

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: object | None = None,
    ) -> httpx.Response:
        """Send a request and raise :class:`GitHubAPIError` on failure."""
        log_debug(logger, "%s %s", method, url)
        try:
            response = await self._client.request(
                method, url, params=params, json=json
            )
        except httpx.HTTPError as exc:
            raise GitHubAPIError.transport_error(method, url, exc) from exc

        if is_suppressed(response):
            log_debug(logger, "%s %s suppressed by dry run", method, url)
            return response
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, method, url)
        return response
