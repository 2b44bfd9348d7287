from __future__ import annotations

from typing import Any, Dict, Optional

from supabase_rest.models.messages import (
    ConnectionConfig,
    OperationKind,
    OperationResult,
    QueryRequest,
    build_model,
)
from supabase_rest.registry.adapters.postgrest import execute, run_adapter
from supabase_rest.services.supabase_service import connection_from_args, operation_args


# Calls a Postgres function through PostgREST:
#   POST /rest/v1/rpc/<function_name>  body = parameters or {}
def query(
    config: ConnectionConfig, request: QueryRequest, transport: Optional[Any] = None
) -> OperationResult:
    return execute(OperationKind.QUERY, config, request, transport)


def db_query_adapter(args: Dict[str, Any], meta: Dict[str, Any]) -> Dict[str, Any]:
    config = connection_from_args(args)
    request = build_model(QueryRequest, operation_args(args))
    return run_adapter(
        OperationKind.QUERY,
        request.function_name,
        query,
        config,
        request,
        meta,
        options=args.get("options"),
    )
