"""
HTTP Routes

Plain HTTP endpoints served next to the MCP endpoint.
"""

from fastapi import APIRouter

from jenkins_mcp.core.constants import APP_VERSION
from jenkins_mcp.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    """
    Health check endpoint.

    Returns server status and version.
    """
    return HealthResponse(version=APP_VERSION, message="Server is healthy")
