# main.py
import os
import logging
from typing import Optional

from fastapi import (
    FastAPI,
    Depends,
    HTTPException,
    status,
)
from pydantic import BaseModel
from psycopg import AsyncConnection

from db import get_conn, PostgresUserDirectory
from notifications.errors import PushDeliveryError
from notifications.fcm import FcmPushSender
from notifications.handlers import (
    notify_chat_message,
    notify_task_assigned,
    notify_task_completed,
)
from notifications.models import ChatMessage, NotificationRequest, Task, TaskChange


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="TaskPush Notifier")


# ---------- Services ----------

push_sender = FcmPushSender()


def get_user_directory(conn: AsyncConnection = Depends(get_conn)) -> PostgresUserDirectory:
    return PostgresUserDirectory(conn)


def get_push_sender() -> FcmPushSender:
    return push_sender


# ---------- Pydantic models ----------


class TriggerResponse(BaseModel):
    notified: bool


class DeviceTokenBody(BaseModel):
    device_token: str


class HealthzResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    detail: str


async def run_handler(handler, *args) -> TriggerResponse:
    """Run a notifier; a gateway fault marks the invocation as failed."""
    try:
        sent: Optional[NotificationRequest] = await handler(*args)
    except PushDeliveryError as e:
        logger.warning("%s failed: %s", handler.__name__, e)
        raise HTTPException(status_code=502, detail=str(e))
    # A disabled FCM sender still counts as an attempt; it logs its own warning
    return TriggerResponse(notified=sent is not None)


# ---------- Document triggers ----------


@app.post(
    "/v1/triggers/tasks/{task_id}/created",
    response_model=TriggerResponse,
    responses={502: {"model": ErrorResponse}},
)
async def task_created(
    task_id: str,
    task: Task,
    users=Depends(get_user_directory),
    push=Depends(get_push_sender),
):
    if task.id is None:
        task.id = task_id
    return await run_handler(notify_task_assigned, task, users, push)


@app.post(
    "/v1/triggers/tasks/{task_id}/updated",
    response_model=TriggerResponse,
    responses={502: {"model": ErrorResponse}},
)
async def task_updated(
    task_id: str,
    change: TaskChange,
    users=Depends(get_user_directory),
    push=Depends(get_push_sender),
):
    for task in (change.before, change.after):
        if task.id is None:
            task.id = task_id
    return await run_handler(notify_task_completed, change.before, change.after, users, push)


@app.post(
    "/v1/triggers/chats/{chat_id}/messages/{message_id}/created",
    response_model=TriggerResponse,
    responses={502: {"model": ErrorResponse}},
)
async def chat_message_created(
    chat_id: str,
    message_id: str,
    message: ChatMessage,
    users=Depends(get_user_directory),
    push=Depends(get_push_sender),
):
    if message.id is None:
        message.id = message_id
    logger.debug("chat %s message %s created", chat_id, message.id)
    return await run_handler(notify_chat_message, message, users, push)


# ---------- Device tokens ----------


@app.put(
    "/v1/users/{user_id}/push/token",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def register_device_token(
    user_id: str,
    body: DeviceTokenBody,
    users=Depends(get_user_directory),
):
    logger.info(
        "register token user_id=%s token_prefix=%s",
        user_id,
        body.device_token[:8],
    )
    await users.set_token(user_id, body.device_token)
    return


@app.delete(
    "/v1/users/{user_id}/push/token",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def unregister_device_token(
    user_id: str,
    users=Depends(get_user_directory),
):
    logger.info("unregister token user_id=%s", user_id)
    await users.clear_token(user_id)
    return


@app.get("/healthz", response_model=HealthzResponse, include_in_schema=False)
async def healthz(conn=Depends(get_conn)):
    """
    Healthcheck: 200 {"status": "ok"} when Postgres answers, 500 otherwise.
    """
    try:
        async with conn.cursor() as cur:
            await cur.execute("SELECT 1")
            await cur.fetchone()
    except Exception:
        raise HTTPException(status_code=500, detail="DB not available")

    return HealthzResponse(status="ok")
