"""
Shared route dependencies.
"""
from fastapi import Request

from nottif.services.orchestrator import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    """Orchestrator built in the application lifespan."""
    return request.app.state.orchestrator
