from shared.clients.connections.OpenAIConnection import OpenAIConnection
from shared.models.config import EnvConfig


class CustomConnection(OpenAIConnection):
    """
    Generic OpenAI-compatible backend (LM Studio, vLLM, OpenRouter, ...).

    Also the fallback for unknown provider kinds, so nothing is strictly
    required: without a base URL the OpenAI endpoint is used, without a key
    no Authorization header is sent.
    """

    def _get_engine_name(self) -> str:
        return "Custom"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="BASE_URL", val_type="string", default=self.DEFAULT_BASE_URL),
        ]
