import json
import uuid

from shared.clients.ClientInterface import ClientInterface
from shared.clients.HttpTransport import HttpTransport
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.search import SearchResultItem


def make_point_id(source_id: str, sequence_index: int) -> str:
    """Build a deterministic UUID5 point ID so re-ingesting a chunk overwrites it."""
    return str(uuid.uuid5(uuid.NAMESPACE_OID, f"{source_id}:{sequence_index}"))


class RAGClientQdrant(RAGClientInterface, ClientInterface):
    """
    Qdrant index engine. The location is the collection name; when empty the
    INDEX_QDRANT_COLLECTION setting is used.
    """

    def __init__(self, helper_config: HelperConfig, location: str, transport: HttpTransport):
        RAGClientInterface.__init__(self, helper_config=helper_config, location=location)
        ClientInterface.__init__(self, helper_config=helper_config, transport=transport)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")
        self._collection_name = location or self.get_config_val("COLLECTION", default="notes", val_type="string")
        self._dimension: int | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Qdrant"

    def get_location(self) -> str:
        return self._collection_name

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="COLLECTION", val_type="string", default="notes"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"api-key": f"{self._api_key}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/healthz"

    def _get_endpoint_collection(self) -> str:
        return f"/collections/{self._collection_name}"

    def _get_endpoint_check_collection_existence(self) -> str:
        return f"/collections/{self._collection_name}/exists"

    def _get_endpoint_points(self) -> str:
        return f"/collections/{self._collection_name}/points"

    def _get_endpoint_delete_points(self) -> str:
        return f"/collections/{self._collection_name}/points/delete"

    def _get_endpoint_search(self) -> str:
        return f"/collections/{self._collection_name}/points/search"

    def _get_endpoint_count(self) -> str:
        return f"/collections/{self._collection_name}/points/count"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_source_filter(self, source_id: str) -> dict:
        return {"must": [{"key": "source_id", "match": {"value": source_id}}]}

    def get_delete_payload(self, filter: dict) -> dict:
        return {"filter": filter}

    def get_search_payload(self, vector: list[float], limit: int) -> dict:
        return {"vector": vector, "limit": limit, "with_payload": True, "with_vector": False}

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def extract_vector_size(self, raw_response: dict) -> int | None:
        vectors = raw_response.get("result", {}).get("config", {}).get("params", {}).get("vectors", {})
        size = vectors.get("size") if isinstance(vectors, dict) else None
        return int(size) if size else None

    def extract_search_results(self, raw_response: dict) -> list[SearchResultItem]:
        results = []
        for hit in raw_response.get("result", []):
            point = VectorPoint(**hit.get("payload", {}))
            results.append(point.to_result(float(hit.get("score", 0.0))))
        return results

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_existence_check(self) -> bool:
        """Check if the collection exists in the Qdrant backend."""
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_check_collection_existence(), raise_on_error=True)
        return bool(resp.json().get("result", {}).get("exists"))

    async def do_create_collection(self, vector_size: int, distance: str = "Cosine") -> None:
        await self.do_request(
            method="PUT",
            json={"vectors": {"size": vector_size, "distance": distance}},
            endpoint=self._get_endpoint_collection(),
            raise_on_error=True,
        )
        self._dimension = vector_size
        self.logging.info("Created Qdrant collection '%s' with dimension %d", self._collection_name, vector_size)

    async def do_open(self, dimension: int | None = None) -> int | None:
        if await self.do_existence_check():
            resp = await self.do_request(method="GET", endpoint=self._get_endpoint_collection(), raise_on_error=True)
            self._dimension = self.extract_vector_size(resp.json())
            return self._dimension
        if dimension:
            await self.do_create_collection(vector_size=dimension)
        return None

    async def do_replace_source(self, source_id: str, points: list[VectorPoint], vectors: list[list[float]]) -> None:
        if len(points) != len(vectors):
            raise ValueError(f"Got {len(points)} points but {len(vectors)} vectors for '{source_id}'.")
        if self._dimension is None:
            if not vectors:
                return
            await self.do_create_collection(vector_size=len(vectors[0]))
        await self.do_delete_source(source_id)
        if not points:
            return
        await self.do_request(
            method="PUT",
            content=json.dumps({
                "points": [
                    {
                        "id": make_point_id(point.source_id, point.sequence_index),
                        "vector": vector,
                        "payload": point.model_dump(),
                    }
                    for point, vector in zip(points, vectors)
                ]
            }),
            params={"wait": "true"},
            endpoint=self._get_endpoint_points(),
            additional_headers={"Content-Type": "application/json"},
            raise_on_error=True,
        )

    async def do_delete_source(self, source_id: str) -> None:
        if self._dimension is None:
            return
        await self.do_request(
            method="POST",
            content=json.dumps(self.get_delete_payload(self.get_source_filter(source_id))),
            params={"wait": "true"},
            endpoint=self._get_endpoint_delete_points(),
            additional_headers={"Content-Type": "application/json"},
            raise_on_error=True,
        )

    async def do_clear(self, reset_dimension: bool = False) -> None:
        if self._dimension is None:
            return
        dimension = self._dimension
        await self.do_request(method="DELETE", endpoint=self._get_endpoint_collection(), raise_on_error=True)
        self._dimension = None
        if reset_dimension:
            # recreated by the next write with that write's vector size
            self.logging.info("Dropped Qdrant collection '%s' and its dimension %d", self._collection_name, dimension)
            return
        await self.do_create_collection(vector_size=dimension)

    async def do_search(self, vector: list[float], limit: int) -> list[SearchResultItem]:
        if self._dimension is None:
            return []
        resp = await self.do_request(
            method="POST",
            json=self.get_search_payload(vector, limit),
            endpoint=self._get_endpoint_search(),
            raise_on_error=True,
        )
        return self.extract_search_results(resp.json())

    async def do_count(self) -> int:
        if self._dimension is None:
            return 0
        resp = await self.do_request(
            method="POST",
            json={"exact": True},
            endpoint=self._get_endpoint_count(),
            raise_on_error=True,
        )
        return resp.json().get("result", {}).get("count", 0)
