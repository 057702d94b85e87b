from shared.clients.audio.AudioClientInterface import AudioClientInterface
from shared.clients.connections.OpenAIConnection import OpenAIConnection


class AudioClientOpenai(OpenAIConnection, AudioClientInterface):

    def _get_endpoint_transcription(self) -> str:
        return "/audio/transcriptions"
