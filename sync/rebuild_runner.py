"""Index rebuild runner entry point.

Rebuilds the vector index from the full note corpus: every note is chunked,
embedded and written to the configured index location. Use it after bulk
changes or after switching the embedding model.

Usage:
    python -m sync.rebuild_runner
"""

import asyncio

from services.context.AssistantContext import AssistantContext
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging


async def main() -> None:
    """Run one full index rebuild."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    context = AssistantContext(helper_config=config)

    try:
        await context.boot()

        # embed client is required, there is no point in rebuilding without embeddings
        embed_client = context.get_embed_client()
        try:
            await embed_client.do_healthcheck()
        except Exception as e:
            logger.error("Error reaching embed client %s: %s. Aborting.", embed_client.get_engine_name(), e)
            return

        index_manager = context.get_index_manager()
        await index_manager.rebuild()
        stats = await index_manager.stats()
        logger.info(
            "Rebuild finished: %s chunks at '%s' (dimension %s)",
            stats["chunk_count"], stats["location"], stats["dimension"], color="green",
        )
    finally:
        await context.close()


if __name__ == "__main__":
    asyncio.run(main())
