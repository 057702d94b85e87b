"""
Shared pytest fixtures for the note assistant tests.

Provides a deterministic mock embedding client and a character-level
encoding so no network or tokenizer download is needed.
"""

import asyncio
import hashlib
import logging

import pytest

from shared.clients.HttpTransport import HttpTransport
from shared.errors import ProviderError
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger
from shared.models.document import Document, EmbeddingVector

ISOLATED_ENV = [
    "HTTP_PROXY_URL",
    "HTTP_TIMEOUT",
    "EMBED_BATCH_SIZE",
    "EMBED_TIMEOUT",
    "LLM_TIMEOUT",
    "AUDIO_TIMEOUT",
    "NOTES_TIMEOUT",
    "INDEX_ENGINE",
    "INDEX_SQLITE_PATH",
    "CHUNK_STRATEGY",
    "TOOLS_IMPERSONATION_ROLE",
]


class MockEmbedClient:
    """
    Deterministic mock embedding client.

    Vectors are derived from the md5 of the text, so identical texts embed
    identically. Texts containing one of fail_on raise a ProviderError.
    """

    def __init__(self, dimension: int = 8, fail_on: tuple[str, ...] = ()):
        self.dimension = dimension
        self.fail_on = fail_on
        self.calls: list[list[str]] = []

    def get_dimensions(self) -> int:
        return self.dimension

    def get_engine_name(self) -> str:
        return "mock"

    def vector_for(self, text: str) -> list[float]:
        digest = hashlib.md5(text.encode()).digest()
        return [(digest[i % len(digest)] + 1) / 256.0 for i in range(self.dimension)]

    async def do_embed(self, texts: list[str]) -> list[EmbeddingVector]:
        self.calls.append(list(texts))
        for text in texts:
            if any(marker in text for marker in self.fail_on):
                raise ProviderError(provider="mock", http_status=500, message="embedding backend failed")
        return [EmbeddingVector(vector=self.vector_for(text)) for text in texts]


class CharEncoding:
    """One token per character; stands in for tiktoken."""

    def encode(self, text: str) -> list[int]:
        return [ord(ch) for ch in text]

    def decode_with_offsets(self, tokens: list[int]) -> tuple[str, list[int]]:
        return "".join(chr(t) for t in tokens), list(range(len(tokens)))


class FakeCorpus:
    """Corpus source whose fetch can be held open with a gate."""

    def __init__(self, documents: list[Document], gate: asyncio.Event | None = None):
        self.documents = documents
        self.gate = gate
        self.calls = 0
        self.started = asyncio.Event()

    async def do_fetch_documents(self) -> list[Document]:
        self.calls += 1
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        return list(self.documents)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for key in ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def logger():
    return ColorLogger(logging.getLogger("note_assistant.tests"))


@pytest.fixture
def helper_config(logger):
    return HelperConfig(logger=logger)


@pytest.fixture
def transport(helper_config):
    return HttpTransport(helper_config=helper_config)


@pytest.fixture
def embed_client():
    return MockEmbedClient()
