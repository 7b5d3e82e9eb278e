"""GitHub REST adapter errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, method: str, path: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"GitHub API {method} {path} returned HTTP {status_code}",
            status_code=status_code,
        )

    @classmethod
    def transport_error(
        cls, method: str, path: str, exc: BaseException
    ) -> GitHubAPIError:
        """Return an error for requests that never produced a response."""
        return cls(f"GitHub API {method} {path} failed: {exc}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub API response missing expected field: {field}")

    @classmethod
    def not_json(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a listing page whose body is not JSON."""
        return cls(f"GitHub API response for {field} is not valid JSON")

    @classmethod
    def unexpected_item(cls, field: str, item: object) -> GitHubResponseShapeError:
        """Return an error for a listing entry that is not an object."""
        return cls(
            f"GitHub API response for {field} contains a non-object entry: "
            f"{type(item).__name__}"
        )


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("RUNNERSYNC_GITHUB_TOKEN or GITHUB_TOKEN is required")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")
