from fastapi import APIRouter

from outage_monitor.api.v1.health import router as health_router
from outage_monitor.api.v1.mcp import router as mcp_router

v1_router = APIRouter()

v1_router.include_router(health_router, tags=["Health"])
v1_router.include_router(mcp_router, tags=["MCP"])
