from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required for a env setting.

    Attributes:
        env_key (str): The key/name of the environment variable to read.
        val_type (str): The expected type of the environment variable's value. Supported types are "string", "number", "bool", and "list".
        default (str | int | bool | list | None): An optional default value if the environment variable is not set. If None, the variable is required and an error will be raised if it is not set.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | list | None = None


class ProviderKind(str, Enum):
    """Backend kinds the provider resolver knows how to construct."""

    OPENAI = "openai"
    AZURE_OPENAI = "azure-openai"
    VOYAGE = "voyage"
    OLLAMA = "ollama"
    CUSTOM = "custom"


class ClientRole(str, Enum):
    """Functional role a resolved client serves."""

    EMBEDDING = "embedding"
    INFERENCE = "inference"
    AUDIO = "audio"


class ProviderConfig(BaseModel):
    """
    Credentials and endpoint of a model backend.

    The kind is kept as a raw string: unknown kinds are valid input and
    degrade to the OpenAI-compatible client when resolved.

    Attributes:
        kind (str): Backend kind, e.g. "openai", "azure-openai", "voyage", "ollama", "custom".
        api_key (str | None): API key, if the backend needs one.
        base_url (str | None): Endpoint override.
        api_version (str | None): API version, forwarded verbatim (Azure only).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    api_key: str | None = Field(default=None, alias="apiKey")
    base_url: str | None = Field(default=None, alias="baseURL")
    api_version: str | None = Field(default=None, alias="apiVersion")


class ModelDescriptor(BaseModel):
    """
    A provider-specific model and the capabilities it is declared to have.

    Capabilities are routing/UI hints only; backends do not enforce them.

    Attributes:
        model_key (str): Opaque, provider-specific model identifier.
        capabilities (frozenset[str]): Capability names (see shared.capabilities.CapabilityRegistry.Capability).
        embedding_dimensions (int): Output dimension of an embedding model; 0 means unknown / auto-detect.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    model_key: str = Field(alias="modelKey")
    capabilities: frozenset[str] = frozenset()
    embedding_dimensions: int = Field(default=0, ge=0, alias="embeddingDimensions")
