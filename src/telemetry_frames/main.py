"""
Telemetry Frames Service
========================

FastAPI entry point exposing the frame builder.

Endpoints:
    GET  /          - Service information
    GET  /health    - Liveness probe
    GET  /metrics   - Builder and transport counters
    GET  /frame     - Latest published frame
    GET  /mode      - Active operation mode
    PUT  /mode      - Change operation mode
    GET  /schema    - Loaded project file summary
    PUT  /schema    - Load a project file
    POST /ingest    - Feed raw device bytes (request body)
    WS   /ws/frames - Real-time frame stream

Run:
    uvicorn telemetry_frames.main:create_app --factory
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from telemetry_frames.builder import FrameBuilder
from telemetry_frames.config import Settings, load_config, setup_logging
from telemetry_frames.decoder.parsing import SeparatorFrameParser
from telemetry_frames.errors import SchemaIOError, SchemaError
from telemetry_frames.models.frame import Frame
from telemetry_frames.models.modes import OperationMode
from telemetry_frames.state import StateStore
from telemetry_frames.stream import FrameReader, WebSocketTransport


logger = logging.getLogger(__name__)


# =============================================================================
# Request Models
# =============================================================================

class ModeRequest(BaseModel):
    """Body of PUT /mode."""

    mode: OperationMode = Field(..., description="New operation mode")


class SchemaRequest(BaseModel):
    """Body of PUT /schema."""

    path: str = Field(..., min_length=1, description="Path to a JSON project file")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The FrameBuilder and transport are created in the lifespan handler
    and stored on ``app.state``.
    """
    if settings is None:
        settings = load_config()
        setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.startup_time = time.time()
        logger.info(f"Starting {settings.app.name} {settings.app.version}")

        transport: Optional[WebSocketTransport] = None
        if settings.transport.url:
            transport = WebSocketTransport(
                url=settings.transport.url,
                reconnect_backoff_ms=settings.transport.reconnect_backoff_ms,
                max_reconnect_attempts=settings.transport.max_reconnect_attempts,
                max_buffer_size=settings.transport.max_buffer_size,
            )
            reader = transport.reader
        else:
            reader = FrameReader(max_buffer_size=settings.transport.max_buffer_size)

        builder = FrameBuilder(
            transport=transport if transport is not None else reader,
            state_store=StateStore(settings.state.path),
            parser=SeparatorFrameParser(settings.parser.separator),
        )

        app.state.builder = builder
        app.state.reader = reader
        app.state.transport = transport

        transport_task: Optional[asyncio.Task] = None
        if transport is not None:
            transport.on_frame = builder.read_data
            transport_task = asyncio.create_task(transport.run(), name="device_transport")

        logger.info(f"Frame builder ready in {builder.operation_mode.value} mode")

        yield

        logger.info("Shutting down gracefully...")
        if transport is not None and transport_task is not None:
            await transport.stop()
            try:
                await asyncio.wait_for(transport_task, timeout=5.0)
            except asyncio.TimeoutError:
                transport_task.cancel()
                try:
                    await transport_task
                except asyncio.CancelledError:
                    pass
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Telemetry Frames",
        description="Decodes raw device frames into structured telemetry",
        version=settings.app.version,
        lifespan=lifespan,
    )

    # =========================================================================
    # HTTP Endpoints
    # =========================================================================

    @app.get("/")
    async def root() -> JSONResponse:
        """Service information endpoint."""
        builder: FrameBuilder = app.state.builder
        return JSONResponse({
            "service": settings.app.name,
            "version": settings.app.version,
            "status": "running",
            "operation_mode": builder.operation_mode.value,
        })

    @app.get("/health")
    async def health() -> JSONResponse:
        """Liveness probe."""
        return JSONResponse({
            "status": "healthy",
            "uptime_seconds": round(time.time() - app.state.startup_time, 1),
        })

    @app.get("/metrics")
    async def metrics() -> JSONResponse:
        """Builder and transport counters."""
        builder: FrameBuilder = app.state.builder
        transport: Optional[WebSocketTransport] = app.state.transport

        transport_metrics = {}
        if transport is not None:
            transport_metrics = {
                "transport_connected": transport.connected,
                **transport.metrics.to_dict(),
            }

        return JSONResponse({
            "uptime_seconds": round(time.time() - app.state.startup_time, 1),
            "buffered_bytes": app.state.reader.buffered_bytes,
            **builder.metrics(),
            **transport_metrics,
        })

    @app.get("/frame")
    async def frame() -> JSONResponse:
        """Latest published frame."""
        latest = app.state.builder.latest_frame
        if latest is None:
            return JSONResponse({"error": "No frame available yet"}, status_code=503)
        return JSONResponse(latest.to_json_dict())

    @app.get("/mode")
    async def get_mode() -> JSONResponse:
        return JSONResponse({"mode": app.state.builder.operation_mode.value})

    @app.put("/mode")
    async def put_mode(request: ModeRequest) -> JSONResponse:
        builder: FrameBuilder = app.state.builder
        builder.set_operation_mode(request.mode)
        return JSONResponse({"mode": builder.operation_mode.value})

    @app.get("/schema")
    async def get_schema() -> JSONResponse:
        store = app.state.builder.schema_store
        if not store.is_loaded:
            return JSONResponse({"loaded": False})
        return JSONResponse({
            "loaded": True,
            "path": store.path,
            "filename": store.filename,
            "title": store.frame.title,
            "group_count": store.frame.group_count,
            "dataset_count": store.frame.dataset_count,
        })

    @app.put("/schema")
    async def put_schema(request: SchemaRequest) -> JSONResponse:
        builder: FrameBuilder = app.state.builder
        try:
            info = builder.load_schema(request.path)
        except SchemaIOError as e:
            return JSONResponse(
                {"error": type(e).__name__, "message": e.message},
                status_code=404,
            )
        except SchemaError as e:
            return JSONResponse(
                {"error": type(e).__name__, "message": e.message},
                status_code=400,
            )
        return JSONResponse({"loaded": True, **info.to_dict()})

    @app.post("/ingest")
    async def ingest(request: Request) -> JSONResponse:
        """Feed raw bytes through transport framing and the decoder."""
        builder: FrameBuilder = app.state.builder
        body = await request.body()

        published = 0
        for message in app.state.reader.feed(body):
            if builder.read_data(message) is not None:
                published += 1

        return JSONResponse({"published": published})

    # =========================================================================
    # WebSocket Endpoints
    # =========================================================================

    @app.websocket("/ws/frames")
    async def frame_stream(websocket: WebSocket) -> None:
        """Push every published frame; slow clients only see the newest."""
        builder: FrameBuilder = app.state.builder
        pending: asyncio.Queue[Frame] = asyncio.Queue(maxsize=1)

        def enqueue(frame: Frame) -> None:
            if pending.full():
                pending.get_nowait()
            pending.put_nowait(frame)

        # Must be subscribed before the handshake completes
        unsubscribe = builder.frame_ready.connect(enqueue)
        receive_task: Optional[asyncio.Task] = None
        get_task: Optional[asyncio.Task] = None
        try:
            await websocket.accept()
            logger.info("Client connected to /ws/frames")

            receive_task = asyncio.create_task(websocket.receive())
            while True:
                get_task = asyncio.create_task(pending.get())
                done, _ = await asyncio.wait(
                    {get_task, receive_task},
                    return_when=asyncio.FIRST_COMPLETED,
                )

                if receive_task in done:
                    message = receive_task.result()
                    if message["type"] == "websocket.disconnect":
                        break
                    # Client messages are ignored
                    receive_task = asyncio.create_task(websocket.receive())

                if get_task in done:
                    await websocket.send_json(get_task.result().to_json_dict())
                else:
                    get_task.cancel()
        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.warning(f"WebSocket error: {e}")
        finally:
            for task in (receive_task, get_task):
                if task is not None and not task.done():
                    task.cancel()
            unsubscribe()
            logger.info("Client disconnected from /ws/frames")

    return app


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = load_config()
    setup_logging(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )
