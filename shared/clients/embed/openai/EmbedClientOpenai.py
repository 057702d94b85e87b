from shared.clients.connections.OpenAIConnection import OpenAIConnection
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface


class EmbedClientOpenai(OpenAIConnection, EmbedClientInterface):

    ################ ENDPOINTS ##################
    def get_endpoint_embedding(self) -> str:
        return "/embeddings"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, texts: list[str]) -> dict:
        """Build the OpenAI embedding request body.

        The dimensions parameter is only understood by the text-embedding-3 family.

        Args:
            texts (list[str]): The texts to embed.

        Returns:
            dict: {"model": "...", "input": [...], "encoding_format": "float"}
        """
        payload = {"model": self.get_model_key(), "input": texts, "encoding_format": "float"}
        if self.get_dimensions() and self.get_model_key().startswith("text-embedding-3"):
            payload["dimensions"] = self.get_dimensions()
        return payload

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        return self._extract_openai_style(response_data, backend=self._get_engine_name())
