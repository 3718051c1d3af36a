"""
FastAPI Application Factory

Creates the FastAPI application serving the MCP server over streamable HTTP.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from mcp.server.fastmcp import FastMCP
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from jenkins_mcp.core.constants import APP_NAME, APP_VERSION, APP_DESCRIPTION
from jenkins_mcp.core.exceptions import JenkinsMCPException
from jenkins_mcp.api.http.routes import router as http_router
from jenkins_mcp.observability.tracing import setup_tracing


def create_app(mcp: FastMCP) -> FastAPI:
    """
    Create and configure FastAPI application.

    The MCP endpoint is served at /mcp and a health check at /health.

    Args:
        mcp: Server from create_server()

    Returns:
        Configured FastAPI application

    Example:
        >>> app = create_app(create_server(config.client_config()))
        >>> uvicorn.run(app, host="127.0.0.1", port=3000)
    """
    # Building the app also creates the session manager used by the lifespan
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_tracing()
        async with mcp.session_manager.run():
            logger.info(f"{APP_NAME} v{APP_VERSION} started")
            yield
        logger.info("Shutting down gracefully...")

    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        description=APP_DESCRIPTION,
        lifespan=lifespan
    )

    @app.exception_handler(JenkinsMCPException)
    async def jenkins_mcp_exception_handler(request: Request, exc: JenkinsMCPException):
        """Handle custom exceptions."""
        logger.error(f"JenkinsMCPException: {exc.message}")
        return JSONResponse(
            status_code=400,
            content=exc.to_dict()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.opt(exception=exc).error(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "InternalServerError",
                "message": "An unexpected error occurred",
                "details": {"type": type(exc).__name__}
            }
        )

    app.include_router(http_router)

    FastAPIInstrumentor.instrument_app(app)

    # Mounted last so explicit routes win
    app.mount("/", mcp_app)

    return app
