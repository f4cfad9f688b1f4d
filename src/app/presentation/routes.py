from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, File, HTTPException, UploadFile
from pydantic import BaseModel, Field, ValidationError

from src.app.application.images import ImageLifecycleManager
from src.app.application.task_store import TaskStore
from src.app.domain.exceptions import (
    TaskNotFoundError,
    UploadValidationError,
    UpstreamFailureError,
)

router = APIRouter(tags=["tasks"])
logger = logging.getLogger(__name__)

# Instantiate services once; the task cache lives as long as the process.
_images = ImageLifecycleManager()
_task_store = TaskStore(images=_images)


class Base64UploadRequest(BaseModel):
    data: str | None = Field(default=None, description="Base64 image, optionally a data URI.")
    title: str | None = Field(default=None, description="Ignored; kept for client compatibility.")


def _errors(exc: ValidationError) -> list:
    return exc.errors(include_url=False, include_context=False)


def _upstream_error(message: str, exc: UpstreamFailureError) -> HTTPException:
    logger.error(
        "%s: %s",
        message,
        exc.operation,
        extra={"operation": exc.operation},
        exc_info=exc.cause,
    )
    return HTTPException(status_code=500, detail={"error": message, "detail": str(exc)})


@router.get("/health", summary="Liveness check")
async def health() -> dict[str, bool]:
    return {"ok": True}


@router.post("/tasks", summary="Create a task")
async def create_task(payload: dict[str, Any] | None = Body(default=None)):
    try:
        record = await _task_store.create(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=_errors(exc))  # noqa: B904
    except UpstreamFailureError as exc:
        raise _upstream_error("Failed to create task", exc)  # noqa: B904
    return record.to_item()


@router.get("/tasks/{task_id}", summary="Fetch a task")
async def get_task(task_id: str):
    try:
        record = await _task_store.get(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Not found")  # noqa: B904
    except UpstreamFailureError as exc:
        raise _upstream_error("Failed to fetch task", exc)  # noqa: B904
    return record.to_item()


@router.put("/tasks/{task_id}", summary="Update a task")
async def update_task(task_id: str, payload: dict[str, Any] | None = Body(default=None)):
    """
    Merges the body into the stored task. Setting `imageKey` attaches an uploaded image.
    """
    try:
        record = await _task_store.update(task_id, payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=_errors(exc))  # noqa: B904
    except UpstreamFailureError as exc:
        raise _upstream_error("Failed to update task", exc)  # noqa: B904
    return record.to_item()


@router.delete("/tasks/{task_id}", summary="Delete a task and its image")
async def delete_task(task_id: str):
    try:
        deletion = await _task_store.delete(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Not found")  # noqa: B904
    except UpstreamFailureError as exc:
        raise _upstream_error("Failed to delete task", exc)  # noqa: B904
    return deletion.model_dump()


@router.post("/upload", summary="Upload an image file")
async def upload(file: UploadFile | None = File(default=None)):
    """
    Stores the multipart `file` field and returns `{id, key, bucket}`.
    """
    body = await file.read() if file is not None else None
    content_type = file.content_type if file is not None else None
    try:
        image = await _images.upload_binary(body, content_type)
    except UploadValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)  # noqa: B904
    except UpstreamFailureError as exc:
        raise _upstream_error("Upload failed", exc)  # noqa: B904
    return image.model_dump(by_alias=True)


@router.post("/upload-base64", summary="Upload a base64 encoded image")
async def upload_base64(request: Base64UploadRequest):
    try:
        image = await _images.upload_base64(request.data)
    except UploadValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)  # noqa: B904
    except UpstreamFailureError as exc:
        raise _upstream_error("Upload failed", exc)  # noqa: B904
    return image.model_dump(by_alias=True)
