from shared.capabilities import CapabilityRegistry
from shared.models.config import EnvConfig


class VoyageConnection:
    """Connection settings of Voyage AI. Embedding-only, fixed endpoint."""

    BASE_URL = "https://api.voyageai.com/v1"

    def _get_engine_name(self) -> str:
        return "Voyage"

    def _get_required_config(self) -> list[EnvConfig]:
        return [EnvConfig(env_key="API_KEY", val_type="string", default=None)]

    def _get_auth_header(self) -> dict:
        return {"Authorization": f"Bearer {self.get_config_val('API_KEY')}"}

    def _get_base_url(self) -> str:
        return self.BASE_URL

    def _get_endpoint_healthcheck(self) -> str:
        return "/embeddings"

    def _get_endpoint_models(self) -> str:
        return ""

    def extract_model_ids(self, response_data: dict) -> list[str]:
        return []

    async def do_fetch_models(self) -> list[str]:
        # voyage has no listing endpoint
        return sorted(key for key in CapabilityRegistry.KNOWN_MODELS if key.startswith("voyage-"))
