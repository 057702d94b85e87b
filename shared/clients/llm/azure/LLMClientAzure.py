from shared.clients.connections.AzureConnection import AzureConnection
from shared.clients.llm.LLMClientInterface import LLMClientInterface


class LLMClientAzure(AzureConnection, LLMClientInterface):

    def _get_endpoint_chat(self) -> str:
        return f"{self._get_deployment_path()}/chat/completions"

    def get_chat_payload(self, messages: list[dict]) -> dict:
        return {"messages": messages, "stream": False}

    def extract_chat_response(self, response_data: dict) -> str:
        return self._extract_openai_style(response_data, backend=self._get_engine_name())
