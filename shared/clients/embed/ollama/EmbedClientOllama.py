from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.embed.EmbedError import EmbedError


class EmbedClientOllama(EmbedClientInterface):
    """Local Ollama server, batch endpoint ``/api/embed``."""

    def _get_engine_name(self) -> str:
        return "Ollama"

    def _get_default_base_url(self) -> str:
        return "http://localhost:11434"

    def _get_default_model(self) -> str:
        return "all-minilm"

    def _get_endpoint_healthcheck(self) -> str:
        # ollama answers "Ollama is running" on its root
        return ""

    def get_endpoint_embedding(self) -> str:
        return "/api/embed"

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Ollama returns ``{"embeddings": [[...], ...]}`` already in input order."""
        embeddings = response_data.get("embeddings")
        if not embeddings or not embeddings[0]:
            raise EmbedError(
                f"Ollama response does not contain embeddings. Response keys: {list(response_data.keys())}"
            )
        return embeddings
