from __future__ import annotations

from typing import Any, Dict, Optional

from supabase_rest.models.messages import (
    ConnectionConfig,
    DeleteRequest,
    InsertRequest,
    OperationKind,
    OperationResult,
    UpdateRequest,
    build_model,
)
from supabase_rest.registry.adapters.postgrest import execute, run_adapter
from supabase_rest.services.supabase_service import connection_from_args, operation_args


# ------------------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------------------
def insert(
    config: ConnectionConfig, request: InsertRequest, transport: Optional[Any] = None
) -> OperationResult:
    """
    POST /<table>?select=...[&on_conflict=cols] with a JSON array body.
    With on_conflict set this is an upsert; resolution (merge-duplicates by
    default, or ignore-duplicates) rides in the same Prefer header as
    return=representation.
    """
    return execute(OperationKind.INSERT, config, request, transport)


def update(
    config: ConnectionConfig, request: UpdateRequest, transport: Optional[Any] = None
) -> OperationResult:
    """PATCH /<table>?select=...&<filter>. Refuses to run without a filter."""
    return execute(OperationKind.UPDATE, config, request, transport)


def delete(
    config: ConnectionConfig, request: DeleteRequest, transport: Optional[Any] = None
) -> OperationResult:
    """
    DELETE /<table>?[select=...&]<filter>. Refuses to run without a filter.
    select='' skips returning the deleted rows; the count then comes from
    Content-Range when the server reports one.
    """
    return execute(OperationKind.DELETE, config, request, transport)


# ------------------------------------------------------------------------------
# Adapters
# ------------------------------------------------------------------------------
def db_insert_adapter(args: Dict[str, Any], meta: Dict[str, Any]) -> Dict[str, Any]:
    config = connection_from_args(args)
    request = build_model(InsertRequest, operation_args(args))
    return run_adapter(OperationKind.INSERT, request.table, insert, config, request, meta, options=args.get("options"))


def db_update_adapter(args: Dict[str, Any], meta: Dict[str, Any]) -> Dict[str, Any]:
    config = connection_from_args(args)
    request = build_model(UpdateRequest, operation_args(args))
    return run_adapter(OperationKind.UPDATE, request.table, update, config, request, meta, options=args.get("options"))


def db_delete_adapter(args: Dict[str, Any], meta: Dict[str, Any]) -> Dict[str, Any]:
    config = connection_from_args(args)
    request = build_model(DeleteRequest, operation_args(args))
    return run_adapter(OperationKind.DELETE, request.table, delete, config, request, meta, options=args.get("options"))
