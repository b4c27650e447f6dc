"""
Event log API routes: snapshot and live Server-Sent Events stream.
"""
from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from nottif.api.dependencies import get_orchestrator
from nottif.constants import SSE_PING_INTERVAL_SECONDS
from nottif.services.orchestrator import Orchestrator

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("")
async def get_events(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Recent notification attempts, newest first."""
    return orchestrator.current_events()


@router.get("/stream")
async def stream_events(request: Request, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """
    Push the full event log every time it changes.

    The subscription is released when the client disconnects and the
    generator is closed by sse-starlette.
    """
    async def event_publisher():
        stream = orchestrator.subscribe_to_events()
        try:
            async for payload in stream:
                if await request.is_disconnected():
                    break
                yield {"data": payload}
        finally:
            await stream.aclose()

    return EventSourceResponse(event_publisher(), ping=SSE_PING_INTERVAL_SECONDS)
