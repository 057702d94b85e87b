"""Error taxonomy for the assistant retrieval-and-action core."""


class AssistantCoreError(Exception):
    """Base exception for all assistant core errors."""
    pass


class UnsupportedProviderKind(AssistantCoreError):
    """A provider kind matched none of the known kinds.

    Never raised by the resolver: resolution degrades to the generic
    OpenAI-compatible client and this error is only logged.
    """

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported provider kind '{kind}'.")


class UnsupportedClientRole(AssistantCoreError):
    """A known provider kind cannot serve the requested client role."""

    def __init__(self, provider: str, role: str):
        self.provider = provider
        self.role = role
        super().__init__(f"Provider '{provider}' does not support the '{role}' role.")


class ProviderError(AssistantCoreError):
    """Network, auth, quota or format failure reported by a model backend."""

    def __init__(self, provider: str, message: str, http_status: int | None = None):
        self.provider = provider
        self.http_status = http_status
        self.message = message
        status = f" (HTTP {http_status})" if http_status is not None else ""
        super().__init__(f"[{provider}]{status} {message}")


class IndexNotReady(AssistantCoreError):
    """The index was used before it reached the ready state."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Vector index is not ready (state: {state}).")


class DimensionMismatchError(AssistantCoreError):
    """A vector does not match the fixed dimension of the index."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Vector dimension {actual} does not match index dimension {expected}.")


class IngestError(AssistantCoreError):
    """Embedding a document failed; nothing was written for it."""

    def __init__(self, source_id: str, chunk_index: int, cause: Exception):
        self.source_id = source_id
        self.chunk_index = chunk_index
        self.cause = cause
        super().__init__(f"Ingest of '{source_id}' failed at chunk {chunk_index}: {cause}")


class ValidationError(AssistantCoreError):
    """Tool input failed its schema."""

    def __init__(self, tool_id: str, errors: list[dict]):
        self.tool_id = tool_id
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or '<input>'}: {err.get('msg', 'invalid')}"
            for err in errors
        )
        super().__init__(f"Invalid input for tool '{tool_id}': {details}")


class InvalidCallerError(AssistantCoreError):
    """The runtime context carried no usable account id."""

    def __init__(self, account_id: object):
        self.account_id = account_id
        super().__init__(f"Invalid account id in runtime context: {account_id!r}.")


class ToolExecutionError(AssistantCoreError):
    """The note-mutation API failed while a tool was running."""

    def __init__(self, tool_id: str, message: str):
        self.tool_id = tool_id
        self.message = message
        super().__init__(message)
