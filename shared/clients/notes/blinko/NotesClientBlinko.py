from shared.clients.HttpTransport import HttpTransport
from shared.clients.notes.NotesClientInterface import NotesClientInterface
from shared.clients.notes.models.Note import Note, NoteType, NoteUpsert
from shared.helper.HelperConfig import HelperConfig
from shared.models.caller import CallerContext
from shared.models.config import EnvConfig

# wire name of each tri-state flag
FLAG_FIELDS = {
    "is_archived": "isArchived",
    "is_top": "isTop",
    "is_share": "isShare",
    "is_recycle": "isRecycle",
}


class NotesClientBlinko(NotesClientInterface):
    def __init__(self, helper_config: HelperConfig, transport: HttpTransport):
        super().__init__(helper_config=helper_config, transport=transport)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Blinko"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        else:
            return {}

    def _get_caller_headers(self, caller: CallerContext) -> dict:
        return {
            "X-Impersonate-Account": caller.account_id,
            "X-Impersonate-Role": caller.role.value,
        }

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/api/v1/public/version"

    def _get_endpoint_notes(self) -> str:
        return "/api/v1/note/list"

    def _get_endpoint_upsert(self) -> str:
        return "/api/v1/note/upsert"

    def _get_endpoint_trash(self) -> str:
        return "/api/v1/note/batch-trash"

    ################ PAYLOAD BUILDER ##################
    def get_list_payload(self, page: int, page_size: int) -> dict:
        return {"page": page, "size": page_size, "type": -1, "isRecycle": False}

    def get_upsert_payload(self, note: NoteUpsert) -> dict:
        payload = {"id": note.id, "content": note.content, "type": int(note.type)}
        for field, wire_name in FLAG_FIELDS.items():
            value = getattr(note, field).as_bool()
            if value is not None:
                payload[wire_name] = value
        return payload

    def get_trash_payload(self, ids: list[int]) -> dict:
        return {"ids": list(ids)}

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_endpoint_notes(self, response: dict | list) -> list[Note]:
        items = response if isinstance(response, list) else response.get("items", response.get("data"))
        if not isinstance(items, list):
            raise ValueError("note listing is not a list")
        return [
            Note(
                id=item["id"],
                content=item.get("content") or "",
                type=NoteType.parse(item.get("type", 0)),
                is_archived=bool(item.get("isArchived", False)),
                is_top=bool(item.get("isTop", False)),
                is_share=bool(item.get("isShare", False)),
                is_recycle=bool(item.get("isRecycle", False)),
            )
            for item in items
        ]
