"""Central configuration helper for the note assistant core."""

import logging
import os

from shared.capabilities import CapabilityRegistry
from shared.models.config import ModelDescriptor, ProviderConfig


class HelperConfig:
    """Central configuration helper. Reads all settings from environment variables."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (str | None): Fallback value if the variable is not set.

        Returns:
            str: The resolved value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        val = os.getenv(key) or None  # empty string → None
        if val is None and default is None:
            raise ValueError(f"Environment variable '{key}' is not set.")
        return val.strip() if val is not None else default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (float | int | None): Fallback value if the variable is not set.

        Returns:
            float | int: The resolved numeric value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
            ValueError: If the value cannot be parsed as a number.
        """
        key = key.upper()
        raw = os.getenv(key) or None
        if raw is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        try:
            return int(raw) if "." not in raw else float(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (bool | None): Fallback value if the variable is not set.

        Returns:
            bool: The resolved boolean value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        raw = os.getenv(key) or None
        if raw is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        return raw.lower() in ("true", "1", "yes")

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",", element_type: type = str) -> list:
        """Read a list environment variable, splitting by a separator.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (list[str] | None): Fallback value if the variable is not set.
            separator (str): The delimiter to split the string into a list.
            element_type (type): The type to which each element should be cast.

        Returns:
            list: The resolved list of elements.

        Raises:
            ValueError: If the variable is not set and no default is provided, or is malformed.
        """
        raw_val = os.getenv(key.upper()) or None
        if raw_val is None:
            if default is None:
                raise ValueError(f"Environment variable '{key.upper()}' is not set.")
            return default
        raw_val = raw_val.strip()
        # make sure string is set in the following syntax: "[elem1,elem2,...]"
        if not raw_val.startswith("[") or not raw_val.endswith("]"):
            raise ValueError(f"Environment variable '{key.upper()}' must be in the format '[elem1{separator}elem2{separator}...]'. Got: '{raw_val}'")
        elements = [v.strip() for v in raw_val[1:-1].split(separator) if v.strip()]
        try:
            return [element_type(elem) for elem in elements]
        except ValueError as e:
            raise ValueError(f"Environment variable '{key.upper()}' contains invalid elements: {e}. Type set to {element_type.__name__}. Got: '{raw_val}'")

    ################ TYPED SETTINGS ##################
    def get_provider_config(self, prefix: str) -> ProviderConfig:
        """Build the ProviderConfig for a client role from {PREFIX}_PROVIDER, _API_KEY, _BASE_URL and _API_VERSION.

        Args:
            prefix (str): Role prefix, e.g. "EMBED", "LLM" or "AUDIO".

        Returns:
            ProviderConfig: The provider settings. The kind is passed through unvalidated.

        Raises:
            ValueError: If {PREFIX}_PROVIDER is not set.
        """
        prefix = prefix.upper()
        return ProviderConfig(
            kind=self.get_string_val(f"{prefix}_PROVIDER"),
            api_key=self.get_string_val(f"{prefix}_API_KEY", default="") or None,
            base_url=self.get_string_val(f"{prefix}_BASE_URL", default="") or None,
            api_version=self.get_string_val(f"{prefix}_API_VERSION", default="") or None,
        )

    def get_model_descriptor(self, prefix: str) -> ModelDescriptor:
        """Build the selected ModelDescriptor for a client role from {PREFIX}_MODEL and {PREFIX}_DIMENSIONS.

        When {PREFIX}_DIMENSIONS is unset the capability registry default is used (0 = auto-detect).

        Raises:
            ValueError: If {PREFIX}_MODEL is not set.
        """
        prefix = prefix.upper()
        model_key = self.get_string_val(f"{prefix}_MODEL")
        dims = os.getenv(f"{prefix}_DIMENSIONS") or None
        return CapabilityRegistry.describe(
            model_key,
            embedding_dimensions=int(self.get_number_val(f"{prefix}_DIMENSIONS")) if dims else None,
        )

    def get_logger(self) -> logging.Logger:
        """Return the application logger.

        Returns:
            logging.Logger: The configured logger instance.
        """
        return self._logger
