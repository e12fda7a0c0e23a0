"""Data models for the GitHub release endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def parse_timestamp(value: str | None) -> datetime:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime.

    GitHub sends UTC values with a trailing ``Z``. Missing or empty
    values map to the epoch so they sort as the oldest.
    """
    if not value:
        return datetime.fromtimestamp(0, tz=UTC)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class RepoContext:
    """Execution context of a run: the repository and the triggering commit."""

    owner: str
    repo: str
    sha: str

    @classmethod
    def from_slug(cls, slug: str, sha: str) -> RepoContext:
        """Build a context from an ``owner/name`` slug."""
        owner, sep, repo = slug.partition("/")
        if not sep or not owner or not repo:
            raise ValueError(f"Repository must be owner/name, got: {slug}")
        return cls(owner=owner, repo=repo, sha=sha)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class Release:
    """A GitHub release."""

    id: int
    tag_name: str
    name: str = ""
    html_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Release:
        return cls(
            id=data["id"],
            tag_name=data.get("tag_name", ""),
            name=data.get("name") or "",
            html_url=data.get("html_url", ""),
        )


@dataclass
class ReleaseAsset:
    """A binary attached to a release. The payload itself is never fetched."""

    id: int
    name: str
    created_at: datetime
    size: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ReleaseAsset:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            created_at=parse_timestamp(data.get("created_at")),
            size=data.get("size", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "size": self.size,
        }


@dataclass
class RateLimitInfo:
    """Rate limit state reported by the last response."""

    limit: int
    remaining: int
    reset: int
    used: int = 0

    @classmethod
    def from_headers(cls, headers: Any) -> RateLimitInfo | None:
        """Extract rate limit info from response headers, if present."""
        try:
            return cls(
                limit=int(headers["x-ratelimit-limit"]),
                remaining=int(headers["x-ratelimit-remaining"]),
                reset=int(headers["x-ratelimit-reset"]),
                used=int(headers.get("x-ratelimit-used", 0)),
            )
        except (KeyError, ValueError, TypeError):
            return None
