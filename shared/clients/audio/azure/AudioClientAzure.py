from shared.clients.audio.AudioClientInterface import AudioClientInterface
from shared.clients.connections.AzureConnection import AzureConnection


class AudioClientAzure(AzureConnection, AudioClientInterface):

    def _get_endpoint_transcription(self) -> str:
        return f"{self._get_deployment_path()}/audio/transcriptions"

    def get_transcription_form(self, language: str | None = None) -> dict:
        # the deployment in the URL selects the model
        return {"language": language} if language else {}
