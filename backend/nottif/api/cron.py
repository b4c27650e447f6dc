"""
Cron job API routes.
"""
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from loguru import logger

from nottif.api.dependencies import get_orchestrator
from nottif.models.event import EventSource
from nottif.services.orchestrator import Orchestrator
from nottif.utils.errors import ConfigWriteError, ErrorCode, ScheduleError, raise_error

router = APIRouter(prefix="/api/cron", tags=["cron"])


class AddCronJobRequest(BaseModel):
    message: str
    schedule: str


@router.get("/list")
async def list_cron_jobs(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return await orchestrator.list_cron_jobs()


@router.post("/add", status_code=status.HTTP_201_CREATED)
async def add_cron_job(body: AddCronJobRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Create a recurring notification. The ID is generated server-side."""
    try:
        job = await orchestrator.add_cron_job(body.message, body.schedule)
    except ScheduleError as e:
        raise_error(ErrorCode.VALIDATION_ERROR, str(e), status_code=400, log=False)
    except ConfigWriteError as e:
        logger.error(f"Cron job not saved: {e}")
        raise_error(ErrorCode.CONFIG_ERROR, "Failed to save config", log=False)

    await orchestrator.record_event(EventSource.SYSTEM, f"Added cron job: {job.message}", True)
    return job


@router.delete("/delete/{job_id}")
async def delete_cron_job(job_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        job = await orchestrator.remove_cron_job(job_id)
    except ConfigWriteError as e:
        logger.error(f"Cron job deletion not saved: {e}")
        raise_error(ErrorCode.CONFIG_ERROR, "Failed to save config", log=False)

    if job is None:
        raise_error(ErrorCode.NOT_FOUND, "Cron job not found", status_code=404, log=False)

    await orchestrator.record_event(EventSource.SYSTEM, f"Deleted cron job: {job.message}", True)
    return {"status": "deleted"}
