from shared.clients.connections.CustomConnection import CustomConnection
from shared.clients.embed.openai.EmbedClientOpenai import EmbedClientOpenai


class EmbedClientCustom(CustomConnection, EmbedClientOpenai):
    """OpenAI wire format against any compatible endpoint."""

    def get_embed_payload(self, texts: list[str]) -> dict:
        payload = {"model": self.get_model_key(), "input": texts}
        if self.get_dimensions():
            payload["dimensions"] = self.get_dimensions()
        return payload
