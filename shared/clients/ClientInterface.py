from abc import ABC, abstractmethod
from typing import Any

import httpx

from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class ClientInterface(ABC):
    """Base for the HTTP backends the engine talks to.

    Every backend is addressed by a client type and an engine name, which also
    namespace its settings: ``<TYPE>_<ENGINE>_BASE_URL`` and
    ``<TYPE>_<ENGINE>_API_KEY`` (e.g. ``EMBED_OLLAMA_BASE_URL``). The request
    timeout is shared per type as ``<TYPE>_TIMEOUT`` (seconds).
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0)

        self.validate_full_configuration()
        self.base_url: str = self.get_config_val("BASE_URL", default=self._get_default_base_url())
        self._api_key: str = self.get_config_val("API_KEY", default="")
        self._client: httpx.AsyncClient | None = None

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """Read every declared setting once so bad values fail at construction.

        Raises:
            ValueError: If a required setting is missing or cannot be parsed.
        """
        for config in self._get_required_config():
            self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    def is_booted(self) -> bool:
        return self._client is not None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        """Lowercase client type, e.g. "embed"."""
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        pass

    def get_engine_name(self) -> str:
        """Lowercase engine name, e.g. "ollama"."""
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        pass

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        """Engine-scoped settings to validate up front. Override to add more."""
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=self._get_default_base_url()),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    def get_config_key_name(self, raw_key: str) -> str:
        """Full environment key for an engine-scoped setting, e.g. "EMBED_OPENAI_API_KEY"."""
        return f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """Read an engine-scoped setting.

        Args:
            raw_key (str): Key without prefix, e.g. "BASE_URL".
            default (Any): Fallback when unset. None makes the setting required.
            val_type (str): "string", "number", "bool" or "list".

        Raises:
            ValueError: On an unknown val_type, or a missing or invalid value.
        """
        readers = {
            "string": self._helper_config.get_string_val,
            "number": self._helper_config.get_number_val,
            "bool": self._helper_config.get_bool_val,
            "list": self._helper_config.get_list_val,
        }
        if val_type not in readers:
            raise ValueError(
                f"Unsupported config value type '{val_type}' for '{raw_key}' "
                f"in {self.get_client_type()} client '{self.get_engine_name()}'."
            )
        return readers[val_type](self.get_config_key_name(raw_key), default=default)

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        """Bearer token header when an API key is configured."""
        return {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_default_base_url(self) -> str:
        """Base URL used when ``<TYPE>_<ENGINE>_BASE_URL`` is unset."""
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        pass

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Open the HTTP client. Tests pass an ``httpx.MockTransport``."""
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)
        self.logging.debug("Booted %s client '%s' at %s.", self.get_client_type(), self.get_engine_name(), self.base_url)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Probe the backend.

        Raises:
            Exception: If the backend answers with a status >= 300.
            httpx.HTTPError: If it cannot be reached.
        """
        return await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck(), raise_on_error=True)

    async def do_request(
        self,
        method: str = "GET",
        json: dict | None = None,
        params: dict | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send a request to ``base_url + endpoint`` with the auth header applied.

        Args:
            method: HTTP method.
            json: JSON body.
            params: Query parameters.
            endpoint: Path below the base URL; the leading slash is optional.
            additional_headers: Override or extend the default headers.
            raise_on_error: Raise instead of returning a response with status >= 300.

        Raises:
            Exception: If boot() was not called, or on an error status with raise_on_error.
            httpx.HTTPError: On transport failures (refused, timeout, ...).
        """
        if self._client is None:
            raise Exception("HTTP client not initialised. Call boot() before making requests.")

        path = endpoint.strip().lstrip("/")
        url = self.base_url.rstrip("/") + (f"/{path}" if path else "")
        headers = {**self._get_auth_header(), **(additional_headers or {})}

        response = await self._client.request(method, url, headers=headers, params=params, json=json)
        if raise_on_error and response.status_code >= 300:
            self.logging.error("Request to %s failed with status %d: %s", url, response.status_code, response.text[:200])
            raise Exception(f"Request to {url} failed with status {response.status_code}")
        return response
