from abc import abstractmethod
from typing import Any

from shared.clients.ClientInterface import ClientInterface
from shared.clients.HttpTransport import HttpTransport
from shared.errors import ProviderError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import ModelDescriptor, ProviderConfig


class ProviderClientInterface(ClientInterface):
    """
    Base class of every model backend client (embedding, inference, audio).

    Configuration comes from the ProviderConfig the client was resolved with,
    not from environment variables: the raw keys API_KEY, BASE_URL and
    API_VERSION map onto the ProviderConfig fields.
    """

    _PROVIDER_CONFIG_FIELDS = {
        "API_KEY": "api_key",
        "BASE_URL": "base_url",
        "API_VERSION": "api_version",
    }

    def __init__(self, helper_config: HelperConfig, transport: HttpTransport, provider_config: ProviderConfig, model: ModelDescriptor):
        # must be set before the base class validates the configuration
        self._provider_config = provider_config
        self.model = model
        super().__init__(helper_config=helper_config, transport=transport)

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_provider_config(self) -> ProviderConfig:
        return self._provider_config

    def get_model_key(self) -> str:
        return self.model.model_key

    ################ CONFIG ##################
    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Reads API_KEY / BASE_URL / API_VERSION from the ProviderConfig; any other key from the environment.

        Raises:
            ValueError: If a required value is missing.
        """
        field = self._PROVIDER_CONFIG_FIELDS.get(raw_key.upper())
        if field is None:
            return super().get_config_val(raw_key=raw_key, default=default, val_type=val_type)
        val = getattr(self._provider_config, field)
        if isinstance(val, str):
            val = val.strip() or None
        if val is None:
            if default is None:
                raise ValueError(
                    f"'{field}' is required for {self.get_client_type().upper()} client '{self.get_engine_name()}'."
                )
            return default
        return val

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_models(self) -> str:
        """
        Returns the endpoint path for model listing requests (e.g. "/models").
        """
        pass

    @abstractmethod
    def extract_model_ids(self, response_data: dict) -> list[str]:
        """
        Extracts the model identifiers from a raw model listing response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            list[str]: Model identifiers usable as ModelDescriptor.model_key.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_models(self) -> list[str]:
        """Fetch the identifiers of the models the backend offers.

        Returns:
            list[str]: The model identifiers.

        Raises:
            ProviderError: If the request fails or the response cannot be parsed.
        """
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_models(), raise_on_error=True)
        try:
            return self.extract_model_ids(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(provider=self.get_engine_name(), message=f"Malformed model listing: {e}") from e
