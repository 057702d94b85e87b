from shared.models.config import EnvConfig


class AzureConnection:
    """
    Connection settings of Azure OpenAI.

    The base URL is the resource endpoint including "/openai"
    (https://<resource>.openai.azure.com/openai); the model key is the
    deployment name. The api-version is forwarded verbatim on every request.
    """

    DEFAULT_API_VERSION = "2024-10-21"

    def _get_engine_name(self) -> str:
        return "Azure"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_VERSION", val_type="string", default=self.DEFAULT_API_VERSION),
        ]

    def _get_auth_header(self) -> dict:
        return {"api-key": self.get_config_val("API_KEY")}

    def _get_base_url(self) -> str:
        return self.get_config_val("BASE_URL")

    def _get_default_params(self) -> dict:
        return {"api-version": self.get_config_val("API_VERSION", default=self.DEFAULT_API_VERSION)}

    def _get_deployment_path(self) -> str:
        return f"/deployments/{self.get_model_key()}"

    def _get_endpoint_healthcheck(self) -> str:
        return "/models"

    def _get_endpoint_models(self) -> str:
        return "/models"

    def extract_model_ids(self, response_data: dict) -> list[str]:
        return [model["id"] for model in response_data.get("data", [])]
