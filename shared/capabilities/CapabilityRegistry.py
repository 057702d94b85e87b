"""Capability registry: which functional traits a model identifier is declared to have.

Pure data plus name heuristics. Capabilities are routing/UI hints; no
backend enforces them.
"""

from enum import Enum

from shared.models.config import ModelDescriptor


class Capability(str, Enum):
    INFERENCE = "inference"
    TOOLS = "tools"
    IMAGE = "image"
    IMAGE_GENERATION = "imageGeneration"
    VIDEO = "video"
    AUDIO = "audio"
    EMBEDDING = "embedding"
    RERANK = "rerank"


_CHAT = frozenset({Capability.INFERENCE})
_CHAT_TOOLS = frozenset({Capability.INFERENCE, Capability.TOOLS})
_CHAT_VISION = frozenset({Capability.INFERENCE, Capability.IMAGE})
_CHAT_TOOLS_VISION = frozenset({Capability.INFERENCE, Capability.TOOLS, Capability.IMAGE})
_MULTIMODAL = frozenset({Capability.INFERENCE, Capability.TOOLS, Capability.IMAGE, Capability.VIDEO, Capability.AUDIO})
_EMBED = frozenset({Capability.EMBEDDING})
_RERANK = frozenset({Capability.RERANK})
_AUDIO = frozenset({Capability.AUDIO})
_IMAGE_GEN = frozenset({Capability.IMAGE_GENERATION})

# model key -> (capabilities, default embedding dimensions; 0 = unknown)
KNOWN_MODELS: dict[str, tuple[frozenset[Capability], int]] = {
    # OpenAI
    "gpt-4o": (_CHAT_TOOLS_VISION, 0),
    "gpt-4o-mini": (_CHAT_TOOLS_VISION, 0),
    "gpt-4-turbo": (_CHAT_TOOLS_VISION, 0),
    "gpt-4-turbo-preview": (_CHAT_TOOLS, 0),
    "gpt-4": (_CHAT_TOOLS, 0),
    "gpt-4-vision-preview": (_CHAT_VISION, 0),
    "gpt-3.5-turbo": (_CHAT_TOOLS, 0),
    "gpt-3.5-turbo-instruct": (_CHAT, 0),
    "text-embedding-3-large": (_EMBED, 3072),
    "text-embedding-3-small": (_EMBED, 1536),
    "text-embedding-ada-002": (_EMBED, 1536),
    "dall-e-3": (_IMAGE_GEN, 0),
    "dall-e-2": (_IMAGE_GEN, 0),
    "whisper-1": (_AUDIO, 0),
    "tts-1": (_AUDIO, 0),
    "tts-1-hd": (_AUDIO, 0),
    # Anthropic
    "claude-3-5-sonnet-20241022": (_CHAT_TOOLS_VISION, 0),
    "claude-3-5-haiku-20241022": (_CHAT_TOOLS_VISION, 0),
    "claude-3-opus-20240229": (_CHAT_TOOLS_VISION, 0),
    "claude-3-sonnet-20240229": (_CHAT_TOOLS_VISION, 0),
    "claude-3-haiku-20240307": (_CHAT_TOOLS_VISION, 0),
    "claude-2.1": (_CHAT, 0),
    "claude-2.0": (_CHAT, 0),
    "claude-instant-1.2": (_CHAT, 0),
    # Google
    "gemini-1.5-pro": (_MULTIMODAL, 0),
    "gemini-1.5-flash": (_MULTIMODAL, 0),
    "gemini-pro": (_CHAT_TOOLS, 0),
    "gemini-pro-vision": (_CHAT_VISION, 0),
    "text-embedding-004": (_EMBED, 768),
    "text-embedding-gecko": (_EMBED, 768),
    # Meta Llama
    "llama-3.1-405b-instruct": (_CHAT_TOOLS, 0),
    "llama-3.1-70b-instruct": (_CHAT_TOOLS, 0),
    "llama-3.1-8b-instruct": (_CHAT_TOOLS, 0),
    "llama-3-70b-instruct": (_CHAT_TOOLS, 0),
    "llama-3-8b-instruct": (_CHAT_TOOLS, 0),
    "llama-2-70b-chat": (_CHAT, 0),
    "llama-2-13b-chat": (_CHAT, 0),
    "llama-2-7b-chat": (_CHAT, 0),
    # Mistral
    "mistral-large-2407": (_CHAT_TOOLS, 0),
    "mistral-large-2402": (_CHAT_TOOLS, 0),
    "mistral-medium": (_CHAT, 0),
    "mistral-small": (_CHAT, 0),
    "mistral-tiny": (_CHAT, 0),
    "mixtral-8x7b-instruct": (_CHAT, 0),
    "mixtral-8x22b-instruct": (_CHAT, 0),
    "mistral-7b-instruct": (_CHAT, 0),
    # Qwen
    "qwen2.5-72b-instruct": (_CHAT_TOOLS, 0),
    "qwen2.5-32b-instruct": (_CHAT_TOOLS, 0),
    "qwen2.5-14b-instruct": (_CHAT_TOOLS, 0),
    "qwen2.5-7b-instruct": (_CHAT_TOOLS, 0),
    "qwen2-72b-instruct": (_CHAT_TOOLS, 0),
    "qwen2-7b-instruct": (_CHAT_TOOLS, 0),
    "qwen-vl-plus": (_CHAT_VISION, 0),
    "qwen-vl-max": (_CHAT_VISION, 0),
    # DeepSeek
    "deepseek-chat": (_CHAT_TOOLS, 0),
    "deepseek-coder": (_CHAT_TOOLS, 0),
    "deepseek-v2.5": (_CHAT_TOOLS, 0),
    # Yi
    "yi-large": (_CHAT_TOOLS, 0),
    "yi-medium": (_CHAT, 0),
    "yi-vision": (_CHAT_VISION, 0),
    # Cohere
    "command-r-plus": (_CHAT_TOOLS, 0),
    "command-r": (_CHAT_TOOLS, 0),
    "command": (_CHAT, 0),
    "command-light": (_CHAT, 0),
    "embed-english-v3.0": (_EMBED, 1024),
    "embed-multilingual-v3.0": (_EMBED, 1024),
    "rerank-english-v3.0": (_RERANK, 0),
    "rerank-multilingual-v3.0": (_RERANK, 0),
    # Voyage
    "voyage-3": (_EMBED, 1024),
    "voyage-3-lite": (_EMBED, 512),
    "voyage-3-large": (_EMBED, 1024),
    "voyage-code-3": (_EMBED, 1024),
    # Ollama
    "llama3.1:70b": (_CHAT_TOOLS, 0),
    "llama3.1:8b": (_CHAT_TOOLS, 0),
    "qwen2.5:72b": (_CHAT_TOOLS, 0),
    "qwen2.5:32b": (_CHAT_TOOLS, 0),
    "qwen2.5:14b": (_CHAT_TOOLS, 0),
    "qwen2.5:7b": (_CHAT_TOOLS, 0),
    "mistral-nemo:12b": (_CHAT, 0),
    "codestral:22b": (_CHAT_TOOLS, 0),
    "codeqwen:7b": (_CHAT_TOOLS, 0),
    "deepseek-coder-v2:16b": (_CHAT_TOOLS, 0),
    "phi3.5:3.8b": (_CHAT, 0),
    "gemma2:27b": (_CHAT, 0),
    "gemma2:9b": (_CHAT, 0),
    "llava:34b": (_CHAT_VISION, 0),
    "llava:13b": (_CHAT_VISION, 0),
    "llava:7b": (_CHAT_VISION, 0),
    "bakllava:7b": (_CHAT_VISION, 0),
    "dolphin-llama3:70b": (_CHAT, 0),
    "dolphin-llama3:8b": (_CHAT, 0),
    "nous-hermes2:34b": (_CHAT, 0),
    "wizardlm2:7b": (_CHAT, 0),
    "neural-chat:7b": (_CHAT, 0),
    "starling-lm:7b": (_CHAT, 0),
    "openchat:7b": (_CHAT, 0),
    "solar:10.7b": (_CHAT, 0),
    "orca-mini:3b": (_CHAT, 0),
    "tinyllama:1.1b": (_CHAT, 0),
    "stable-code:3b": (_CHAT, 0),
    "nomic-embed-text": (_EMBED, 768),
    "mxbai-embed-large": (_EMBED, 1024),
    "all-minilm:l6-v2": (_EMBED, 384),
    # Azure OpenAI deployments
    "gpt-4o-azure": (_CHAT_TOOLS_VISION, 0),
    "gpt-4-turbo-azure": (_CHAT_TOOLS_VISION, 0),
    "gpt-35-turbo-azure": (_CHAT_TOOLS, 0),
    # Perplexity
    "llama-3.1-sonar-large-128k-online": (_CHAT_TOOLS, 0),
    "llama-3.1-sonar-small-128k-online": (_CHAT_TOOLS, 0),
    "llama-3.1-sonar-large-128k-chat": (_CHAT_TOOLS, 0),
    "llama-3.1-sonar-small-128k-chat": (_CHAT_TOOLS, 0),
}

# substring -> capabilities, checked in order for unknown model keys
_NAME_HINTS: list[tuple[tuple[str, ...], frozenset[Capability]]] = [
    (("rerank",), _RERANK),
    (("embed", "bge-", "e5-", "minilm"), _EMBED),
    (("whisper", "tts", "transcribe"), _AUDIO),
    (("dall-e", "image", "stable-diffusion", "flux"), _IMAGE_GEN),
    (("vision", "-vl", "llava", "pixtral"), _CHAT_VISION),
]


def _normalize(model_key: str) -> str:
    return model_key.strip().lower()


def infer_capabilities(model_key: str) -> frozenset[Capability]:
    """Guess capabilities from a model name that is not in the table.

    Args:
        model_key (str): Provider-specific model identifier.

    Returns:
        frozenset[Capability]: The inferred capabilities; plain inference when nothing matches.
    """
    key = _normalize(model_key)
    for needles, capabilities in _NAME_HINTS:
        if any(needle in key for needle in needles):
            return capabilities
    return _CHAT


def get_capabilities(model_key: str) -> frozenset[Capability]:
    """Returns the declared capabilities of a model, falling back to name heuristics."""
    known = KNOWN_MODELS.get(_normalize(model_key))
    if known is not None:
        return known[0]
    return infer_capabilities(model_key)


def get_default_dimensions(model_key: str) -> int:
    """Returns the known embedding dimension of a model, or 0 when unknown."""
    known = KNOWN_MODELS.get(_normalize(model_key))
    return known[1] if known else 0


def describe(model_key: str, embedding_dimensions: int | None = None) -> ModelDescriptor:
    """Builds a ModelDescriptor for a model key.

    Args:
        model_key (str): Provider-specific model identifier.
        embedding_dimensions (int | None): Explicit dimension; None uses the table default.

    Returns:
        ModelDescriptor: The descriptor with capability names and dimensions filled in.
    """
    dims = get_default_dimensions(model_key) if embedding_dimensions is None else embedding_dimensions
    return ModelDescriptor(
        model_key=model_key,
        capabilities=frozenset(c.value for c in get_capabilities(model_key)),
        embedding_dimensions=dims,
    )


def supports(descriptor: ModelDescriptor, capability: Capability) -> bool:
    return capability.value in descriptor.capabilities
