from shared.models.config import EnvConfig


class OpenAIConnection:
    """Connection settings of the OpenAI API. Mixed into OpenAI clients of every role."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def _get_engine_name(self) -> str:
        return "OpenAI"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="BASE_URL", val_type="string", default=self.DEFAULT_BASE_URL),
        ]

    def _get_auth_header(self) -> dict:
        api_key = self.get_config_val("API_KEY", default="")
        if api_key:
            return {"Authorization": f"Bearer {api_key}"}
        return {}

    def _get_base_url(self) -> str:
        return self.get_config_val("BASE_URL", default=self.DEFAULT_BASE_URL)

    def _get_endpoint_healthcheck(self) -> str:
        return "/models"

    def _get_endpoint_models(self) -> str:
        return "/models"

    def extract_model_ids(self, response_data: dict) -> list[str]:
        return [model["id"] for model in response_data.get("data", [])]
