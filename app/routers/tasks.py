# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Status of queued criteria refreshes and batch champion checks.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from app.dependencies import require_admin_key

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Get the status of a background task.

    States:
    - PENDING: waiting in queue (or unknown id)
    - STARTED: picked up by a worker
    - PROGRESS: running; includes progress percent and current step
    - SUCCESS: includes the task's summary dict
    - FAILURE: includes the error message
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)
        status = result.status
    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=503, detail=f"Failed to get task status: {e}")

    response = TaskStatusResponse(task_id=task_id, status=status)

    if status == "PROGRESS":
        info = result.info or {}
        response.progress = info.get("percent", 0)
        response.message = info.get("message", "Processing...")

    elif status == "SUCCESS":
        response.result = result.result
        response.progress = 100
        response.message = "Complete"

    elif status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
        response.message = "Failed"

    elif status == "PENDING":
        response.progress = 0
        response.message = "Waiting in queue..."

    elif status == "STARTED":
        response.progress = 0
        response.message = "Starting..."

    return response


@router.delete("/{task_id}", dependencies=[Depends(require_admin_key)])
async def cancel_task(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Cancel a pending or running task.

    Finished tasks are left alone.
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)

        if result.status in ["SUCCESS", "FAILURE"]:
            return {
                "task_id": task_id,
                "message": f"Task already {result.status.lower()}, cannot cancel",
                "cancelled": False,
            }

        result.revoke(terminate=True)
    except Exception as e:
        logger.error(f"Error cancelling task: {e}")
        raise HTTPException(status_code=503, detail=f"Failed to cancel task: {e}")

    logger.info(f"Cancelled task {task_id}")
    return {
        "task_id": task_id,
        "message": "Task cancelled",
        "cancelled": True,
    }
