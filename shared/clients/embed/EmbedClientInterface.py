from abc import abstractmethod

from shared.clients.ProviderClientInterface import ProviderClientInterface
from shared.errors import ProviderError
from shared.models.document import EmbeddingVector


class EmbedClientInterface(ProviderClientInterface):

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "embed"
        """
        return "embed"

    def get_dimensions(self) -> int:
        """
        Returns the configured embedding dimension of the model, 0 if unknown.
        """
        return self.model.embedding_dimensions

    ################ ENDPOINTS ##################
    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        """
        Returns the endpoint path for embedding requests.

        Returns:
            str: The endpoint path for embedding requests (e.g. "/api/embed")
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_embed_payload(self, texts: list[str]) -> dict:
        """Build the backend-specific request body for an embedding request.

        Args:
            texts (list[str]): The texts to embed.

        Returns:
            dict: JSON-serialisable request body (e.g. {"model": "...", "input": [...]}).
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Extract embedding vectors from a raw embedding API response.

        Response format differs by backend:
        - Ollama /api/embed: {"embeddings": [[...], [...]]}, already ordered
        - OpenAI-compatible: {"data": [{"embedding": [...], "index": 0}]}, needs sorting

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            list[list[float]]: Embedding vectors in the same order as the input texts.

        Raises:
            ValueError: If the response format is invalid or embeddings are empty.
        """
        pass

    @staticmethod
    def _extract_openai_style(response_data: dict, backend: str) -> list[list[float]]:
        """Shared parser for {"data": [{"embedding": [...], "index": n}]} responses."""
        data = response_data.get("data")
        if not data:
            raise ValueError(
                f"{backend} response does not contain embeddings. "
                f"Response keys: {list(response_data.keys())}"
            )
        ordered = sorted(data, key=lambda item: item.get("index", 0))
        return [item["embedding"] for item in ordered]

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_embed(self, texts: list[str] | str) -> list[EmbeddingVector]:
        """Send an embedding request and return the extracted vectors.

        One vector per input text, in input order. The whole call fails if the
        backend fails, returns the wrong number of vectors, or returns vectors
        whose dimension differs from the configured model dimension.

        Args:
            texts (list[str] | str): One or more texts to embed.

        Returns:
            list[EmbeddingVector]: Embedding vectors in the same order as the inputs.

        Raises:
            ProviderError: On any backend or format failure.
        """
        texts = [texts] if isinstance(texts, str) else list(texts)
        if not texts:
            return []
        body = self.get_embed_payload(texts)
        response = await self.do_request(method="POST", endpoint=self.get_endpoint_embedding(), json=body)
        if response.status_code != 200:
            self.logging.error(
                "Embedding request to %s failed: status %d, body: %s",
                self.get_engine_name(),
                response.status_code,
                response.text[:200],
            )
            raise ProviderError(
                provider=self.get_engine_name(),
                http_status=response.status_code,
                message=f"Embedding request failed: {response.text[:200]}",
            )
        try:
            vectors = self.extract_embeddings_from_response(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(provider=self.get_engine_name(), http_status=response.status_code, message=str(e)) from e

        if len(vectors) != len(texts):
            raise ProviderError(
                provider=self.get_engine_name(),
                message=f"Expected {len(texts)} embeddings, got {len(vectors)}.",
            )
        expected = self.get_dimensions()
        if expected:
            for vector in vectors:
                if len(vector) != expected:
                    raise ProviderError(
                        provider=self.get_engine_name(),
                        message=f"Model '{self.get_model_key()}' returned dimension {len(vector)}, configured {expected}.",
                    )
        return [EmbeddingVector(vector=vector) for vector in vectors]

    async def do_fetch_embedding_dimension(self) -> int:
        """Return the model's output dimension, probing the backend when it is not configured.

        Returns:
            int: The number of dimensions produced by the embedding model.

        Raises:
            ProviderError: If the probe request fails.
        """
        if self.get_dimensions():
            return self.get_dimensions()
        probe = await self.do_embed(["dimension probe"])
        self.logging.info("Detected embedding dimension %d for model '%s'", probe[0].dimension, self.get_model_key())
        return probe[0].dimension
