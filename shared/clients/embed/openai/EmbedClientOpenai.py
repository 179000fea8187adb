from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.embed.EmbedError import EmbedError


class EmbedClientOpenai(EmbedClientInterface):
    """OpenAI-compatible embedding backend (OpenAI, LM Studio, vLLM, ...)."""

    def _get_engine_name(self) -> str:
        return "Openai"

    def _get_default_base_url(self) -> str:
        return "https://api.openai.com"

    def _get_default_model(self) -> str:
        return "text-embedding-3-small"

    def _get_endpoint_healthcheck(self) -> str:
        return "/v1/models"

    def get_endpoint_embedding(self) -> str:
        return "/v1/embeddings"

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Read ``{"data": [{"embedding": [...], "index": n}, ...]}``.

        Items carry their input position in ``index`` and are not guaranteed
        to arrive in order, so they are sorted first.

        Raises:
            EmbedError: If data is missing, an item is malformed or a vector is empty.
        """
        data = response_data.get("data")
        if not data:
            raise EmbedError(
                f"OpenAI-compatible response does not contain embedding data. Response keys: {list(response_data.keys())}"
            )
        try:
            embeddings = [item["embedding"] for item in sorted(data, key=lambda item: item["index"])]
        except (KeyError, TypeError) as exc:
            raise EmbedError(f"Malformed embedding item in OpenAI-compatible response: {exc}") from exc
        if not embeddings[0]:
            raise EmbedError("OpenAI-compatible response contains an empty embedding.")
        return embeddings
