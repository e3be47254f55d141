"""
FastAPI backend for algoviz.

This module provides the web API for the algorithm visualizer: the
algorithm catalogue, the shared visualization settings, and the single
interactive session (select, run, stop, reset), with live statistics
pushed over WebSocket.
"""

import uvicorn
from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, ORJSONResponse

from api.shared.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

from api.algorithms import router as algorithms_router
from api.app_config import app_config
from api.runners.manager import runner_manager
from api.session import router as session_router
from api.settings import router as settings_router
from api.system import log_error
from api.system import router as system_router
from websocket import SESSION_CHANNEL, ws_manager

# Create FastAPI app
app = FastAPI(
    title="algoviz API",
    description="API for the interactive, step-paced algorithm visualizer",
    version="1.0.0",
    default_response_class=ORJSONResponse,
)


# ============= Exception Handlers for Error Logging =============


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Log HTTP exceptions and return JSON response."""
    # Only log 5xx errors (server errors)
    if exc.status_code >= 500:
        log_error(
            endpoint=str(request.url.path),
            message=str(exc.detail),
            level="error",
            details=f"Status code: {exc.status_code}",
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Log unexpected exceptions and return JSON response."""
    log_error(
        endpoint=str(request.url.path),
        message=str(exc),
        level="critical",
        details=f"Unhandled exception: {type(exc).__name__}",
        exc=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# CORS for the browser client served from a dev server on another port
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Must be False when using allow_origins=["*"]
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(system_router, prefix="/api", tags=["system"])
app.include_router(algorithms_router, prefix="/api", tags=["algorithms"])
app.include_router(settings_router, prefix="/api", tags=["settings"])
app.include_router(session_router, prefix="/api", tags=["session"])


# ============= Startup / Shutdown Events =============


@app.on_event("startup")
async def startup_event():
    logger.info("algoviz starting (time scale %s)", app_config.time_scale)


@app.on_event("shutdown")
async def shutdown_event():
    """Stop any active run before the event loop goes away."""
    runner_manager.shutdown()
    logger.info("algoviz stopped")


# ============= WebSocket Endpoints =============


async def _serve_websocket(websocket: WebSocket, label: str) -> None:
    try:
        while True:
            message_text = await websocket.receive_text()
            response = await ws_manager.handle_message(websocket, message_text)
            if response:
                await ws_manager.send_to_connection(websocket, response)
    except WebSocketDisconnect:
        await ws_manager.disconnect(websocket)
    except Exception as e:
        logger.error("%s WebSocket error: %s", label, e)
        await ws_manager.disconnect(websocket)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, client_id: str = None):
    """
    Main WebSocket endpoint for real-time updates.

    Clients subscribe to channels for specific updates:
    - session - Runner selection, statistics, running state and settings

    Message format (JSON):
    {
        "type": "subscribe" | "unsubscribe" | "ping",
        "channel": "channel_name",
        "data": {}
    }
    """
    await ws_manager.connect(websocket, client_id)
    await _serve_websocket(websocket, "Main")


@app.websocket("/ws/session")
async def session_websocket_endpoint(websocket: WebSocket, client_id: str = None):
    """
    WebSocket endpoint for session updates.

    Automatically subscribes to the session channel on connection.
    """
    await ws_manager.connect(websocket, client_id or "session")
    await ws_manager.subscribe(websocket, SESSION_CHANNEL)
    await _serve_websocket(websocket, "Session")


@app.get("/api/ws/stats")
async def get_websocket_stats():
    """Get WebSocket connection statistics."""
    return {
        "total_connections": ws_manager.get_connection_count(),
        "session_subscribers": ws_manager.get_channel_subscribers(SESSION_CHANNEL),
    }


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="algoviz backend server")
    parser.add_argument(
        "--port",
        type=int,
        default=app_config.port,
        help="Port to run the server on (default: 8000 or ALGOVIZ_PORT env var)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=app_config.host,
        help="Host to bind to (default: 127.0.0.1 or ALGOVIZ_HOST env var)",
    )
    parser.add_argument(
        "--reload",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable auto-reload",
    )
    args = parser.parse_args()

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=app_config.log_level.lower(),
    )
