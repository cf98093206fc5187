from typing import Any

from pydantic import BaseModel

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    method: str
    params: dict[str, Any] = {}


class JsonRpcError(BaseModel):
    code: int
    message: str


class JsonRpcResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResult(BaseModel):
    """MCP tool-call result envelope."""

    content: list[TextContent]
    is_error: bool = False

    @property
    def text(self) -> str:
        return self.content[0].text if self.content else ""

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"content": [c.model_dump() for c in self.content]}
        if self.is_error:
            result["isError"] = True
        return result
