from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.clients.HttpTransport import HttpTransport
from shared.clients.notes.models.Note import Note, NoteUpsert
from shared.errors import ProviderError
from shared.helper.HelperConfig import HelperConfig
from shared.models.caller import CallerContext
from shared.models.document import Document


class NotesClientInterface(ClientInterface):
    """
    Client of the note service: the corpus the index is built from, and the
    mutation API the tools act on. Every mutation runs as an explicit caller.
    """

    def __init__(self, helper_config: HelperConfig, transport: HttpTransport):
        super().__init__(helper_config=helper_config, transport=transport)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "notes"
        """
        return "notes"

    ################ CONFIG ##################
    def _get_config_key_name(self, raw_key: str) -> str:
        """
        Returns:
            str: The full configuration key name. E.g. "NOTES_BASE_URL"
        """
        return f"{self.get_client_type().upper()}_{raw_key.upper()}"

    ################ AUTH ##################
    @abstractmethod
    def _get_caller_headers(self, caller: CallerContext) -> dict:
        """
        Returns the headers that make the note service act as the given caller.

        Args:
            caller (CallerContext): The impersonated identity.

        Returns:
            dict: Headers to add to a mutation request.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_notes(self) -> str:
        """
        Returns the endpoint path for listing notes.
        """
        pass

    @abstractmethod
    def _get_endpoint_upsert(self) -> str:
        """
        Returns the endpoint path for creating or updating a note.
        """
        pass

    @abstractmethod
    def _get_endpoint_trash(self) -> str:
        """
        Returns the endpoint path for moving notes to the recycle bin.
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_list_payload(self, page: int, page_size: int) -> dict:
        pass

    @abstractmethod
    def get_upsert_payload(self, note: NoteUpsert) -> dict:
        """Build the request body for an upsert. Flags left UNSET must not be sent."""
        pass

    @abstractmethod
    def get_trash_payload(self, ids: list[int]) -> dict:
        pass

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def _parse_endpoint_notes(self, response: dict | list) -> list[Note]:
        """
        Parses one page of the note listing endpoint.

        Args:
            response (dict | list): The raw JSON response.

        Returns:
            list[Note]: The notes on this page.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def _do_mutation(self, endpoint: str, body: dict, caller: CallerContext) -> dict | list | None:
        resp = await self.do_request(
            method="POST",
            endpoint=endpoint,
            json=body,
            additional_headers=self._get_caller_headers(caller),
            raise_on_error=True,
        )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None

    async def do_fetch_notes(self) -> list[Note]:
        """
        Fetches all notes from the note service, page by page.

        Returns:
            list[Note]: Every note that is not in the recycle bin.

        Raises:
            ProviderError: If a page request fails or cannot be parsed.
        """
        notes: list[Note] = []
        page = 1
        page_size = 100
        while True:
            resp = await self.do_request(
                method="POST",
                endpoint=self._get_endpoint_notes(),
                json=self.get_list_payload(page=page, page_size=page_size),
                raise_on_error=True,
            )
            try:
                batch = self._parse_endpoint_notes(resp.json())
            except (ValueError, KeyError, TypeError) as e:
                raise ProviderError(provider=self.get_engine_name(), http_status=resp.status_code, message=f"Invalid note listing: {e}") from e
            notes.extend(note for note in batch if not note.is_recycle)
            self.logging.info("Fetched notes page %d from %s, total notes so far: %d", page, self._get_engine_name(), len(notes))
            if len(batch) < page_size:
                break
            page += 1
        return notes

    async def do_fetch_documents(self) -> list[Document]:
        """
        Returns the corpus for an index rebuild: one document per note with content.
        """
        return [
            Document(source_id=str(note.id), text=note.content)
            for note in await self.do_fetch_notes()
            if note.content.strip()
        ]

    async def do_trash_many(self, ids: list[int], caller: CallerContext) -> None:
        """
        Moves the given notes to the recycle bin as the given caller.

        Raises:
            ProviderError: If the note service rejects the request.
        """
        await self._do_mutation(self._get_endpoint_trash(), self.get_trash_payload(ids), caller)
        self.logging.info("Trashed notes %s as account %s", ids, caller.account_id)

    async def do_upsert(self, note: NoteUpsert, caller: CallerContext) -> dict | list | None:
        """
        Creates or updates a note as the given caller.

        Returns:
            dict | list | None: The parsed response body, if any.

        Raises:
            ProviderError: If the note service rejects the request.
        """
        result = await self._do_mutation(self._get_endpoint_upsert(), self.get_upsert_payload(note), caller)
        self.logging.debug("Upserted note %d as account %s", note.id, caller.account_id)
        return result
