"""Embedding backend base.

A backend turns one batch of texts into one vector per text in a single HTTP
round-trip. Everything above it (batching, correlation, validation of vector
shapes) lives in EmbedWorker and EmbeddingClient.
"""

from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.clients.embed.EmbedError import EmbedError
from shared.helper.HelperConfig import HelperConfig


class EmbedClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        # EMBED_MODEL is shared by all engines; each engine knows a sensible default
        self.embed_model = helper_config.get_string_val("EMBED_MODEL", default="") or self._get_default_model()

    ##########################################
    ################ GETTER ##################
    ##########################################

    def _get_client_type(self) -> str:
        return "embed"

    @abstractmethod
    def _get_default_model(self) -> str:
        pass

    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        """Path of the batch embedding endpoint, e.g. "/api/embed"."""
        pass

    def get_embed_payload(self, texts: list[str]) -> dict:
        """Request body for one batch. Ollama and OpenAI-compatible servers share this shape."""
        return {"model": self.embed_model, "input": texts}

    @abstractmethod
    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Pull the vectors out of a parsed response body, in input order.

        Raises:
            EmbedError: If the body carries no usable embeddings.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_embed(self, texts: list[str]) -> list[list[float]]:
        """Embed one batch.

        Raises:
            EmbedError: On an error status, a non-JSON body or a body without embeddings.
            httpx.HTTPError: If the backend cannot be reached.
        """
        response = await self.do_request(
            method="POST",
            endpoint=self.get_endpoint_embedding(),
            json=self.get_embed_payload(texts),
        )
        if response.status_code != 200:
            self.logging.error(
                "Embedding request to '%s' (model %s) failed: status %d, body: %s",
                self.get_engine_name(),
                self.embed_model,
                response.status_code,
                response.text[:200],
            )
            raise EmbedError(f"Embedding request failed with status {response.status_code}.")
        try:
            body = response.json()
        except ValueError as exc:
            raise EmbedError("Embedding response is not valid JSON.") from exc
        if not isinstance(body, dict):
            raise EmbedError(f"Embedding response has unexpected type {type(body).__name__}.")

        vectors = self.extract_embeddings_from_response(body)
        self.logging.debug("Embedded %d texts with %s.", len(vectors), self.embed_model)
        return vectors
