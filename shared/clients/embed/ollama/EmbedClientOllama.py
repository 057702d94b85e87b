from shared.clients.connections.OllamaConnection import OllamaConnection
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.errors import ProviderError


class EmbedClientOllama(OllamaConnection, EmbedClientInterface):

    ################ ENDPOINTS ##################
    def get_endpoint_embedding(self) -> str:
        # ollama uses /api/embed for embedding requests
        return "/api/embed"

    def get_endpoint_model_details(self) -> str:
        # ollama uses /api/show for model details, with model name in body
        return "/api/show"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, texts: list[str]) -> dict:
        """Build the Ollama embedding request body.

        Args:
            texts (list[str]): The texts to embed.

        Returns:
            dict: {"model": "...", "input": [...]}
        """
        return {"model": self.get_model_key(), "input": texts}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_vector_size_from_model_info(self, model_info: dict) -> int:
        info: dict = model_info.get("model_info", {})
        for key, value in info.items():
            if key.endswith(".embedding_length"):
                return int(value)
        raise ValueError(f"Could not determine embedding vector size for model {self.get_model_key()}")

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        """Extract embedding vectors from an Ollama /api/embed response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            list[list[float]]: Embedding vectors in input order.

        Raises:
            ValueError: If the response does not contain valid embeddings.
        """
        embeddings = response_data.get("embeddings")
        if not embeddings or not embeddings[0]:
            raise ValueError(
                "Ollama response does not contain valid embeddings. "
                f"Response keys: {list(response_data.keys())}"
            )
        return embeddings

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_embedding_dimension(self) -> int:
        """Read the dimension from /api/show instead of embedding a probe text."""
        if self.get_dimensions():
            return self.get_dimensions()
        response = await self.do_request(
            method="POST",
            json={"name": self.get_model_key()},
            endpoint=self.get_endpoint_model_details(),
            raise_on_error=True,
        )
        try:
            return self.extract_vector_size_from_model_info(model_info=response.json())
        except ValueError as e:
            raise ProviderError(provider=self.get_engine_name(), message=str(e)) from e
