from shared.clients.HttpTransport import HttpTransport
from shared.helper.HelperConfig import HelperConfig
from shared.clients.rag.RAGClientInterface import RAGClientInterface


class RAGClientManager:
    """
    Manager class to build index storage clients for the configured engine.
    """

    def __init__(self, helper_config: HelperConfig, transport: HttpTransport):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self._transport = transport
        self.engine = self._get_engine_from_env()

    def _get_engine_from_env(self) -> str:
        """
        Reads the index engine from ENV configuration.

        Returns:
            str: The capitalized engine name, e.g. "Sqlite".
        """
        engine = self.helper_config.get_string_val("INDEX_ENGINE", default="sqlite")
        return engine.strip().lower().capitalize()

    def get_default_location(self) -> str:
        """
        Returns the storage location used when none is given: the sqlite file path,
        or an empty string for engines that resolve their own default.
        """
        if self.engine == "Sqlite":
            return self.helper_config.get_string_val("INDEX_SQLITE_PATH", default="vector.db")
        return ""

    def get_client(self, location: str | None = None) -> RAGClientInterface:
        """
        Instantiates the storage client of the configured engine, bound to a location.

        Args:
            location (str | None): File path or collection name. Defaults to the engine's configured location.

        Returns:
            RAGClientInterface: The storage client.

        Raises:
            ValueError: If the configured engine is not supported.
        """
        if location is None:
            location = self.get_default_location()
        className = f"RAGClient{self.engine}"
        try:
            module = __import__(
                f"shared.clients.rag.{self.engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported index engine specified: '{self.engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config, location=location, transport=self._transport)
        self.logging.debug("Instantiated index client for engine %s at '%s'", self.engine, client.get_location())
        return client
