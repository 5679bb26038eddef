# notifications/handlers.py
import logging
from typing import Optional

from .models import TASK_STATUS_COMPLETED, ChatMessage, NotificationRequest, Task
from .push import PushSender, UserDirectory, notify_user

logger = logging.getLogger(__name__)

NO_TITLE = "No Title"
UNKNOWN_SENDER = "Unknown"
DEFAULT_MESSAGE_TEXT = "You received a new message"


async def notify_task_assigned(
  task: Task,
  users: UserDirectory,
  push: PushSender,
) -> Optional[NotificationRequest]:
  """tasks/{task_id} created: tell the assignee."""
  if not task.assigned_to:
    logger.info("task %s created without assignee", task.id)
    return None

  return await notify_user(
    users,
    push,
    task.assigned_to,
    title="New Task Assigned",
    body=f"Task: {task.title or NO_TITLE} has been assigned to you.",
  )


async def notify_task_completed(
  before: Task,
  after: Task,
  users: UserDirectory,
  push: PushSender,
) -> Optional[NotificationRequest]:
  """tasks/{task_id} updated: tell the assigner once the task becomes completed."""
  if before.status == TASK_STATUS_COMPLETED or after.status != TASK_STATUS_COMPLETED:
    return None

  if not after.assigned_by:
    logger.info("task %s completed without assigner", after.id)
    return None

  return await notify_user(
    users,
    push,
    after.assigned_by,
    title="Task Completed",
    body=f"Task: {after.title or NO_TITLE} has been completed.",
  )


async def notify_chat_message(
  message: ChatMessage,
  users: UserDirectory,
  push: PushSender,
) -> Optional[NotificationRequest]:
  """chats/{chat_id}/messages/{message_id} created: tell the receiver."""
  if not message.receiver_id:
    logger.info("message %s created without receiver", message.id)
    return None

  return await notify_user(
    users,
    push,
    message.receiver_id,
    title=f"New message from {message.sender_name or UNKNOWN_SENDER}",
    body=message.text or DEFAULT_MESSAGE_TEXT,
  )
