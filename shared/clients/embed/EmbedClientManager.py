import importlib

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig


class EmbedClientManager:
    """Resolves ``EMBED_ENGINE`` to a backend instance.

    Engine ``<name>`` maps to ``shared.clients.embed.<name>.EmbedClient<Name>``,
    so a new backend only needs a module in that place.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Lowercase engine name from ``EMBED_ENGINE``.

        Raises:
            ValueError: If EMBED_ENGINE is unset or blank.
        """
        engine = self.helper_config.get_string_val("EMBED_ENGINE").strip().lower()
        if not engine:
            raise ValueError("No embedding engine specified in EMBED_ENGINE.")
        return engine

    def _initialize_client(self) -> EmbedClientInterface:
        """
        Raises:
            ValueError: If no backend module exists for the engine.
        """
        engine = self._get_engine_from_env()
        class_name = f"EmbedClient{engine.capitalize()}"
        try:
            module = importlib.import_module(f"shared.clients.embed.{engine}.{class_name}")
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as exc:
            raise ValueError(f"Unsupported embedding engine '{engine}': {exc}") from exc

        client = client_class(helper_config=self.helper_config)
        self.logging.info("Embedding backend: %s (model %s).", engine, client.embed_model)
        return client

    def get_client(self) -> EmbedClientInterface:
        return self.client
