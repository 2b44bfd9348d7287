from __future__ import annotations

from typing import Any, Dict, Optional

from supabase_rest.models.messages import (
    ConnectionConfig,
    OperationKind,
    OperationResult,
    SelectRequest,
    build_model,
)
from supabase_rest.registry.adapters.postgrest import execute, run_adapter
from supabase_rest.services.supabase_service import connection_from_args, operation_args


def select(
    config: ConnectionConfig, request: SelectRequest, transport: Optional[Any] = None
) -> OperationResult:
    """
    GET /<table>?select=...&<filter>&order=...&limit=...&offset=...
    Only the table is required. size is the number of rows returned.
    """
    return execute(OperationKind.SELECT, config, request, transport)


def db_select_adapter(args: Dict[str, Any], meta: Dict[str, Any]) -> Dict[str, Any]:
    config = connection_from_args(args)
    request = build_model(SelectRequest, operation_args(args))
    return run_adapter(OperationKind.SELECT, request.table, select, config, request, meta, options=args.get("options"))
