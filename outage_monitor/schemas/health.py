from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    server: str
    version: str
    timestamp: str


class ServerInfoResponse(BaseModel):
    name: str
    version: str
    description: str
    transport: str
    endpoints: dict[str, str]
    tools: list[str]
    auth_methods: list[str]
