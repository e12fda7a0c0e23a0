"""Entry point: prune the nightly release of the repository being built."""

import asyncio

from nightly_pruner.config import get_settings
from nightly_pruner.github.client import GitHubClient
from nightly_pruner.github.models import RepoContext
from nightly_pruner.logging import get_logger, setup_logging
from nightly_pruner.pruner import PruneResult, prune

log = get_logger("nightly_pruner.main")


async def run() -> PruneResult:
    """Build the client and context from settings and run the prune."""
    settings = get_settings()
    context = RepoContext.from_slug(settings.github_repository, settings.github_sha)

    async with GitHubClient(
        settings.github_token.get_secret_value(),
        base_url=settings.github_api_url,
        timeout=settings.request_timeout,
    ) as client:
        result = await prune(
            client,
            context,
            tag=settings.nightly_tag,
            keep=settings.keep_assets,
            force=settings.force_tag_update,
        )
        if client.rate_limit is not None:
            log.debug("github_rate_limit", remaining=client.rate_limit.remaining)
    return result


def main() -> None:
    """Console script entry point. Failures propagate and fail the job."""
    setup_logging()
    asyncio.run(run())


if __name__ == "__main__":
    main()
