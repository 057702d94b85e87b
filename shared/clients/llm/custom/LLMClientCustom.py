from shared.clients.connections.CustomConnection import CustomConnection
from shared.clients.llm.openai.LLMClientOpenai import LLMClientOpenai


class LLMClientCustom(CustomConnection, LLMClientOpenai):
    """OpenAI chat wire format against any compatible endpoint."""
    pass
