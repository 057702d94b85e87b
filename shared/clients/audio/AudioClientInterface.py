from abc import abstractmethod

from shared.clients.ProviderClientInterface import ProviderClientInterface
from shared.errors import ProviderError


class AudioClientInterface(ProviderClientInterface):

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "audio"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_transcription(self) -> str:
        """Returns the endpoint path for speech-to-text requests (e.g. "/audio/transcriptions")."""
        pass

    ################ PAYLOAD BUILDER ##################
    def get_transcription_form(self, language: str | None = None) -> dict:
        """Form fields sent next to the audio file."""
        form = {"model": self.get_model_key()}
        if language:
            form["language"] = language
        return form

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_transcribe(self, audio: bytes, filename: str = "audio.wav", language: str | None = None) -> str:
        """Transcribe an audio recording to text.

        Args:
            audio (bytes): Raw audio file content.
            filename (str): File name sent to the backend; its extension selects the decoder.
            language (str | None): Optional ISO-639-1 hint.

        Returns:
            str: The transcribed text.

        Raises:
            ProviderError: If the request fails or the response has no text.
        """
        response = await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_transcription(),
            files={"file": (filename, audio)},
            data=self.get_transcription_form(language),
            raise_on_error=True,
        )
        try:
            text = response.json().get("text")
        except ValueError as e:
            raise ProviderError(provider=self.get_engine_name(), http_status=response.status_code, message=str(e)) from e
        if text is None:
            raise ProviderError(provider=self.get_engine_name(), message="Transcription response does not contain text.")
        return text
