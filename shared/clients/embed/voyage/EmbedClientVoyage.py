import httpx

from shared.clients.connections.VoyageConnection import VoyageConnection
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface


class EmbedClientVoyage(VoyageConnection, EmbedClientInterface):

    ################ ENDPOINTS ##################
    def get_endpoint_embedding(self) -> str:
        return "/embeddings"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, texts: list[str]) -> dict:
        """Build the Voyage embedding request body.

        Args:
            texts (list[str]): The texts to embed.

        Returns:
            dict: {"model": "...", "input": [...]} plus output_dimension when configured.
        """
        payload: dict = {"model": self.get_model_key(), "input": texts}
        if self.get_dimensions():
            payload["output_dimension"] = self.get_dimensions()
        return payload

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        return self._extract_openai_style(response_data, backend=self._get_engine_name())

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Voyage has no health endpoint; a one-text embedding proves key and model."""
        return await self.do_request(
            method="POST",
            endpoint=self.get_endpoint_embedding(),
            json=self.get_embed_payload(["healthcheck"]),
            raise_on_error=True,
        )
