# notifications/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

TASK_STATUS_COMPLETED = "completed"


class Record(BaseModel):
    # Documents come from the mobile app with camelCase keys
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Task(Record):
    id: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    assigned_to: Optional[str] = Field(None, alias="assignedTo")
    assigned_by: Optional[str] = Field(None, alias="assignedBy")


class TaskChange(BaseModel):
    before: Task
    after: Task


class ChatMessage(Record):
    id: Optional[str] = None
    sender_name: Optional[str] = Field(None, alias="senderName")
    text: Optional[str] = None
    receiver_id: Optional[str] = Field(None, alias="receiverId")


class User(Record):
    id: str
    fcm_token: Optional[str] = Field(None, alias="fcmToken")


class NotificationRequest(BaseModel):
    """Single push message, built per event and never stored."""

    token: str
    title: str
    body: str
