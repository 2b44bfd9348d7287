# supabase_rest/models/messages.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from supabase_rest.errors import ConfigurationError


class OperationKind(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    QUERY = "query"


# Workflow configs use camelCase (apiKey, onConflict, functionName);
# Python callers can use the field names directly.
_STEP_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConnectionConfig(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    url: str
    api_key: str
    schema_name: str = Field(default="public", alias="schema")


# ---- operation requests ----


class SelectRequest(BaseModel):
    model_config = _STEP_CONFIG

    table: str
    select: Optional[str] = None
    filter: Optional[str] = None
    order: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    # exact | planned | estimated, sent as Prefer: count=<mode>
    count: Optional[str] = None


class InsertRequest(BaseModel):
    model_config = _STEP_CONFIG

    table: str
    data: List[Dict[str, Any]]
    select: Optional[str] = None
    on_conflict: Optional[str] = None
    # merge-duplicates when unset, or ignore-duplicates
    resolution: Optional[str] = None

    @field_validator("data", mode="before")
    @classmethod
    def _rows_as_list(cls, v: Any) -> Any:
        # PostgREST bulk insert takes an array; a single object becomes [obj]
        if isinstance(v, dict):
            return [v]
        return v


class UpdateRequest(BaseModel):
    model_config = _STEP_CONFIG

    table: str
    data: Dict[str, Any]
    filter: Optional[str] = None
    select: Optional[str] = None


class DeleteRequest(BaseModel):
    model_config = _STEP_CONFIG

    table: str
    filter: Optional[str] = None
    # None -> '*'; '' -> do not return deleted rows
    select: Optional[str] = None
    count: Optional[str] = None


class QueryRequest(BaseModel):
    model_config = _STEP_CONFIG

    function_name: str
    parameters: Optional[Dict[str, Any]] = None


# ---- result ----

_OUTPUT_KEYS = {
    OperationKind.SELECT: ("rows", "size"),
    OperationKind.QUERY: ("rows", "size"),
    OperationKind.INSERT: ("inserted_rows", "inserted_count"),
    OperationKind.UPDATE: ("updated_rows", "updated_count"),
    OperationKind.DELETE: ("deleted_rows", "deleted_count"),
}


class OperationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    uri: str
    code: int
    headers: Dict[str, List[str]] = Field(default_factory=dict)
    rows: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    raw_response: Optional[str] = None
    total_count: Optional[int] = None

    def as_output(self) -> Dict[str, Any]:
        """Plain dict with the operation's own key names (inserted_rows, deleted_count, ...)."""
        rows_key, count_key = _OUTPUT_KEYS[self.kind]
        out: Dict[str, Any] = {
            "uri": self.uri,
            "code": self.code,
            "headers": dict(self.headers),
            rows_key: self.rows,
            count_key: self.count,
            "raw_response": self.raw_response,
        }
        if self.total_count is not None:
            out["total_count"] = self.total_count
        return out


M = TypeVar("M", bound=BaseModel)


def build_model(model: Type[M], data: Dict[str, Any]) -> M:
    """Validate a step config dict, reporting problems as ConfigurationError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid {model.__name__}: {e}") from e
