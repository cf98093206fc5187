"""JSON-RPC 2.0 endpoint carrying MCP requests over plain HTTP POST.

Only ``tools/call`` needs a StatusGator credential; the handshake and tool
discovery stay open so clients can connect before configuring a key.
"""

import json
from typing import Any

import pydantic
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from outage_monitor.config import PROTOCOL_VERSION, SERVER_NAME, SERVER_VERSION
from outage_monitor.core.exceptions import CredentialError
from outage_monitor.dependencies import build_dispatcher, get_request_logger
from outage_monitor.schemas.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
)
from outage_monitor.services.tools import TOOLS

router = APIRouter()

_NO_CACHE_HEADERS = {"Cache-Control": "no-cache"}


def _result(request_id: Any, result: dict) -> JSONResponse:
    body = JsonRpcResponse(id=request_id, result=result)
    return JSONResponse(content=body.model_dump(exclude={"error"}), headers=_NO_CACHE_HEADERS)


def _error(request_id: Any, code: int, message: str, status_code: int) -> JSONResponse:
    body = JsonRpcResponse(id=request_id, error=JsonRpcError(code=code, message=message))
    content = body.model_dump(exclude={"result"})
    return JSONResponse(status_code=status_code, content=content, headers=_NO_CACHE_HEADERS)


def _initialize_result() -> dict:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
    }


@router.post("/mcp")
async def mcp_endpoint(request: Request) -> Response:
    log = get_request_logger(request)

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(None, PARSE_ERROR, "Parse error", 400)

    raw_id = body.get("id") if isinstance(body, dict) else None
    try:
        rpc = JsonRpcRequest.model_validate(body)
    except pydantic.ValidationError:
        return _error(raw_id, INVALID_REQUEST, "Invalid Request", 400)

    log = log.bind(rpc_method=rpc.method, rpc_id=rpc.id)
    log.info("mcp_request_received")

    if rpc.method == "initialize":
        return _result(rpc.id, _initialize_result())

    if rpc.method == "notifications/initialized":
        return Response(status_code=202)

    if rpc.method == "tools/list":
        return _result(rpc.id, {"tools": TOOLS})

    if rpc.method == "tools/call":
        tool_name = rpc.params.get("name")
        if not isinstance(tool_name, str) or not tool_name:
            return _error(rpc.id, INVALID_PARAMS, "Invalid params: tool name is required", 400)
        try:
            dispatcher = await build_dispatcher(request)
            result = await dispatcher.call_tool(tool_name, rpc.params.get("arguments"))
        except CredentialError as e:
            log.warning("mcp_credential_missing", tool=tool_name)
            return _error(rpc.id, INTERNAL_ERROR, e.message, e.status)
        except Exception as e:
            log.exception("mcp_request_failed", tool=tool_name)
            return _error(rpc.id, INTERNAL_ERROR, str(e) or "Internal error", 500)
        return _result(rpc.id, result.to_dict())

    return _error(rpc.id, METHOD_NOT_FOUND, f"Method not found: {rpc.method}", 404)
