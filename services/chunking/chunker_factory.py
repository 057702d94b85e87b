from services.chunking.ChunkerInterface import ChunkerInterface
from services.chunking.MarkdownChunker import MarkdownChunker
from services.chunking.TokenChunker import TokenChunker
from shared.helper.HelperConfig import HelperConfig

CHUNKERS: dict[str, type[ChunkerInterface]] = {
    "markdown": MarkdownChunker,
    "token": TokenChunker,
}


def create_chunker(helper_config: HelperConfig) -> ChunkerInterface:
    """
    Builds the chunker selected by CHUNK_STRATEGY ("markdown" or "token").

    Raises:
        ValueError: If the strategy is unknown.
    """
    strategy = helper_config.get_string_val("CHUNK_STRATEGY", default="markdown").lower()
    chunker_class = CHUNKERS.get(strategy)
    if chunker_class is None:
        raise ValueError(f"Unsupported chunk strategy '{strategy}'. Expected one of: {', '.join(CHUNKERS)}.")
    chunker = chunker_class()
    helper_config.get_logger().debug(
        "Using %s chunker: size %d, overlap %d %s",
        strategy, chunker.chunk_size, chunker.chunk_overlap, chunker.get_unit(),
    )
    return chunker
