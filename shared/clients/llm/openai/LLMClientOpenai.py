from shared.clients.connections.OpenAIConnection import OpenAIConnection
from shared.clients.llm.LLMClientInterface import LLMClientInterface


class LLMClientOpenai(OpenAIConnection, LLMClientInterface):

    def _get_endpoint_chat(self) -> str:
        return "/chat/completions"

    def get_chat_payload(self, messages: list[dict]) -> dict:
        return {"model": self.get_model_key(), "messages": messages, "stream": False}

    def extract_chat_response(self, response_data: dict) -> str:
        return self._extract_openai_style(response_data, backend=self._get_engine_name())
