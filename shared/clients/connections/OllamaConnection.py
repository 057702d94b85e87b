from shared.models.config import EnvConfig


class OllamaConnection:
    """Connection settings of a local or self-hosted Ollama server. No API key required."""

    DEFAULT_BASE_URL = "http://localhost:11434"

    def _get_engine_name(self) -> str:
        return "Ollama"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=self.DEFAULT_BASE_URL),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    def _get_auth_header(self) -> dict:
        api_key = self.get_config_val("API_KEY", default="")
        if api_key:
            return {"Authorization": f"Bearer {api_key}"}
        return {}

    def _get_base_url(self) -> str:
        # get_config_val already trims; ollama urls are often pasted with whitespace
        return self.get_config_val("BASE_URL", default=self.DEFAULT_BASE_URL)

    def _get_endpoint_healthcheck(self) -> str:
        # root on ollama
        return ""

    def _get_endpoint_models(self) -> str:
        # ollama uses /api/tags for model listing
        return "/api/tags"

    def extract_model_ids(self, response_data: dict) -> list[str]:
        return [model["name"] for model in response_data.get("models", [])]
