from typing import Callable

from shared.clients.HttpTransport import HttpTransport
from shared.clients.ProviderClientInterface import ProviderClientInterface
from shared.clients.audio.AudioClientInterface import AudioClientInterface
from shared.clients.audio.azure.AudioClientAzure import AudioClientAzure
from shared.clients.audio.custom.AudioClientCustom import AudioClientCustom
from shared.clients.audio.openai.AudioClientOpenai import AudioClientOpenai
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.embed.azure.EmbedClientAzure import EmbedClientAzure
from shared.clients.embed.custom.EmbedClientCustom import EmbedClientCustom
from shared.clients.embed.ollama.EmbedClientOllama import EmbedClientOllama
from shared.clients.embed.openai.EmbedClientOpenai import EmbedClientOpenai
from shared.clients.embed.voyage.EmbedClientVoyage import EmbedClientVoyage
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.clients.llm.azure.LLMClientAzure import LLMClientAzure
from shared.clients.llm.custom.LLMClientCustom import LLMClientCustom
from shared.clients.llm.ollama.LLMClientOllama import LLMClientOllama
from shared.clients.llm.openai.LLMClientOpenai import LLMClientOpenai
from shared.errors import UnsupportedClientRole, UnsupportedProviderKind
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import ClientRole, ModelDescriptor, ProviderConfig, ProviderKind

ClientConstructor = Callable[..., ProviderClientInterface]

# kind -> role -> client class. A missing role means the kind cannot serve it.
CLIENT_REGISTRY: dict[ProviderKind, dict[ClientRole, ClientConstructor]] = {
    ProviderKind.OPENAI: {
        ClientRole.EMBEDDING: EmbedClientOpenai,
        ClientRole.INFERENCE: LLMClientOpenai,
        ClientRole.AUDIO: AudioClientOpenai,
    },
    ProviderKind.AZURE_OPENAI: {
        ClientRole.EMBEDDING: EmbedClientAzure,
        ClientRole.INFERENCE: LLMClientAzure,
        ClientRole.AUDIO: AudioClientAzure,
    },
    ProviderKind.VOYAGE: {
        ClientRole.EMBEDDING: EmbedClientVoyage,
    },
    ProviderKind.OLLAMA: {
        ClientRole.EMBEDDING: EmbedClientOllama,
        ClientRole.INFERENCE: LLMClientOllama,
    },
    ProviderKind.CUSTOM: {
        ClientRole.EMBEDDING: EmbedClientCustom,
        ClientRole.INFERENCE: LLMClientCustom,
        ClientRole.AUDIO: AudioClientCustom,
    },
}

KIND_ALIASES: dict[str, ProviderKind] = {
    "openai": ProviderKind.OPENAI,
    "azure-openai": ProviderKind.AZURE_OPENAI,
    "azureopenai": ProviderKind.AZURE_OPENAI,
    "azure": ProviderKind.AZURE_OPENAI,
    "voyage": ProviderKind.VOYAGE,
    "ollama": ProviderKind.OLLAMA,
    "custom": ProviderKind.CUSTOM,
}

FALLBACK_KIND = ProviderKind.CUSTOM


class ProviderResolver:
    """
    Turns a ProviderConfig into a capability-typed client.

    Every client is built with the same shared HttpTransport. Unknown kinds are
    never rejected: they degrade to the OpenAI-compatible custom client.
    Resolution performs no network call.
    """

    def __init__(self, helper_config: HelperConfig, transport: HttpTransport):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self._transport = transport

    def resolve_kind(self, kind: str) -> ProviderKind:
        """
        Maps a raw provider kind string to a known kind.

        Args:
            kind (str): The raw kind, matched case-insensitively after trimming.

        Returns:
            ProviderKind: The matching kind, or the custom fallback for unknown kinds.
        """
        normalized = (kind or "").strip().lower()
        resolved = KIND_ALIASES.get(normalized)
        if resolved is None:
            self.logging.warning("%s Falling back to the '%s' client.", UnsupportedProviderKind(kind), FALLBACK_KIND.value)
            return FALLBACK_KIND
        return resolved

    def resolve(self, config: ProviderConfig, role: ClientRole | str, model: ModelDescriptor) -> ProviderClientInterface:
        """
        Builds the client serving a role for a provider.

        Args:
            config (ProviderConfig): Backend kind and credentials.
            role (ClientRole | str): "embedding", "inference" or "audio".
            model (ModelDescriptor): The model the client will call.

        Returns:
            ProviderClientInterface: An EmbedClientInterface, LLMClientInterface or AudioClientInterface.

        Raises:
            UnsupportedClientRole: If a known kind cannot serve the role.
            ValueError: If the role is unknown or required settings (e.g. an API key) are missing.
        """
        role = ClientRole(role)
        kind = self.resolve_kind(config.kind)
        constructor = CLIENT_REGISTRY[kind].get(role)
        if constructor is None:
            raise UnsupportedClientRole(provider=kind.value, role=role.value)
        client = constructor(
            helper_config=self.helper_config,
            transport=self._transport,
            provider_config=config,
            model=model,
        )
        self.logging.debug("Resolved %s client '%s' for model '%s'", role.value, client.get_engine_name(), model.model_key)
        return client

    def resolve_embedding(self, config: ProviderConfig, model: ModelDescriptor) -> EmbedClientInterface:
        return self.resolve(config, ClientRole.EMBEDDING, model)

    def resolve_inference(self, config: ProviderConfig, model: ModelDescriptor) -> LLMClientInterface:
        return self.resolve(config, ClientRole.INFERENCE, model)

    def resolve_audio(self, config: ProviderConfig, model: ModelDescriptor) -> AudioClientInterface:
        return self.resolve(config, ClientRole.AUDIO, model)
