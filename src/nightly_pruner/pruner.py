"""Nightly release pruning.

Keeps the newest assets on the nightly release, deletes the rest, then
moves the nightly tag to the triggering commit. Every step awaits the
previous one; the first failure stops the run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from nightly_pruner.constants import KEEP_ASSETS, NIGHTLY_TAG
from nightly_pruner.github.client import GitHubAPIError, GitHubNotFoundError
from nightly_pruner.github.models import Release, ReleaseAsset, RepoContext
from nightly_pruner.logging import get_logger

log = get_logger("nightly_pruner.pruner")


class PrunerError(Exception):
    """Base class for pruning failures."""


class NotFoundError(PrunerError):
    """No release carries the requested tag."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"No release found for tag {tag!r}")
        self.tag = tag


class DeletionError(PrunerError):
    """Deleting a release asset failed."""

    def __init__(self, asset_id: int, reason: str) -> None:
        super().__init__(f"Failed to delete asset {asset_id}: {reason}")
        self.asset_id = asset_id


class RefUpdateError(PrunerError):
    """Moving the tag reference failed."""

    def __init__(self, ref: str, sha: str, reason: str) -> None:
        super().__init__(f"Failed to move {ref} to {sha}: {reason}")
        self.ref = ref
        self.sha = sha


class ReleaseAPI(Protocol):
    """The slice of the hosting API the pruner calls."""

    async def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Release: ...

    async def list_release_assets(
        self, owner: str, repo: str, release_id: int
    ) -> list[ReleaseAsset]: ...

    async def delete_release_asset(self, owner: str, repo: str, asset_id: int) -> None: ...

    async def update_ref(
        self, owner: str, repo: str, ref: str, sha: str, force: bool = False
    ) -> dict[str, Any]: ...


@dataclass
class PruneResult:
    """Outcome of a successful prune."""

    release_id: int
    tag: str
    sha: str
    kept: list[int] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "release_id": self.release_id,
            "tag": self.tag,
            "sha": self.sha,
            "kept": self.kept,
            "deleted": self.deleted,
        }


def select_stale_assets(
    assets: Sequence[ReleaseAsset], keep: int = KEEP_ASSETS
) -> tuple[list[ReleaseAsset], list[ReleaseAsset]]:
    """Split assets into the ``keep`` newest and the rest.

    Both lists are ordered newest first. The sort is stable, so assets
    with equal ``created_at`` keep their listing order.
    """
    if keep < 0:
        raise ValueError("keep must be >= 0")
    ordered = sorted(assets, key=lambda asset: asset.created_at, reverse=True)
    return ordered[:keep], ordered[keep:]


class ReleaseAssetPruner:
    """Prunes the assets of one tagged release and moves its tag."""

    def __init__(
        self,
        client: ReleaseAPI,
        context: RepoContext,
        *,
        tag: str = NIGHTLY_TAG,
        keep: int = KEEP_ASSETS,
        force: bool = False,
    ) -> None:
        if keep < 0:
            raise ValueError("keep must be >= 0")
        self._client = client
        self._context = context
        self._tag = tag
        self._keep = keep
        self._force = force

    @property
    def ref(self) -> str:
        return f"tags/{self._tag}"

    async def prune(self) -> PruneResult:
        """Run the full prune: resolve, list, delete, move tag."""
        ctx = self._context
        log.info("pruner_started", owner=ctx.owner, repo=ctx.repo, tag=self._tag)

        release = await self._resolve_release()
        assets = await self._client.list_release_assets(ctx.owner, ctx.repo, release.id)
        kept, stale = select_stale_assets(assets, self._keep)
        log.info(
            "pruner_assets_listed",
            release_id=release.id,
            total=len(assets),
            keeping=len(kept),
            deleting=len(stale),
        )

        result = PruneResult(
            release_id=release.id,
            tag=self._tag,
            sha=ctx.sha,
            kept=[asset.id for asset in kept],
        )
        for asset in stale:
            await self._delete(asset)
            result.deleted.append(asset.id)

        await self._move_tag()
        log.info("pruner_complete", **result.to_dict())
        return result

    async def _resolve_release(self) -> Release:
        ctx = self._context
        try:
            release = await self._client.get_release_by_tag(ctx.owner, ctx.repo, self._tag)
        except GitHubNotFoundError as exc:
            log.error("pruner_release_not_found", tag=self._tag)
            raise NotFoundError(self._tag) from exc
        log.debug("pruner_release_resolved", release_id=release.id, tag=self._tag)
        return release

    async def _delete(self, asset: ReleaseAsset) -> None:
        ctx = self._context
        try:
            await self._client.delete_release_asset(ctx.owner, ctx.repo, asset.id)
        except GitHubAPIError as exc:
            log.error("pruner_asset_delete_failed", asset_id=asset.id, error=str(exc))
            raise DeletionError(asset.id, str(exc)) from exc
        log.info(
            "pruner_asset_deleted",
            asset_id=asset.id,
            name=asset.name,
            created_at=asset.created_at.isoformat(),
        )

    async def _move_tag(self) -> None:
        ctx = self._context
        try:
            await self._client.update_ref(
                ctx.owner, ctx.repo, self.ref, ctx.sha, force=self._force
            )
        except GitHubAPIError as exc:
            log.error("pruner_ref_update_failed", ref=self.ref, sha=ctx.sha, error=str(exc))
            raise RefUpdateError(self.ref, ctx.sha, str(exc)) from exc
        log.info("pruner_tag_moved", ref=self.ref, sha=ctx.sha[:12])


async def prune(
    client: ReleaseAPI,
    context: RepoContext,
    *,
    tag: str = NIGHTLY_TAG,
    keep: int = KEEP_ASSETS,
    force: bool = False,
) -> PruneResult:
    """Callback entry: prune ``tag``'s release in ``context`` using ``client``."""
    return await ReleaseAssetPruner(client, context, tag=tag, keep=keep, force=force).prune()
