from shared.clients.connections.AzureConnection import AzureConnection
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface


class EmbedClientAzure(AzureConnection, EmbedClientInterface):

    ################ ENDPOINTS ##################
    def get_endpoint_embedding(self) -> str:
        return f"{self._get_deployment_path()}/embeddings"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, texts: list[str]) -> dict:
        # the deployment in the URL selects the model
        payload: dict = {"input": texts}
        if self.get_dimensions():
            payload["dimensions"] = self.get_dimensions()
        return payload

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embeddings_from_response(self, response_data: dict) -> list[list[float]]:
        return self._extract_openai_style(response_data, backend=self._get_engine_name())
