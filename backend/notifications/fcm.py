# notifications/fcm.py
import os
import asyncio
import logging
from typing import Optional

import httpx
from google.oauth2 import service_account
import google.auth.exceptions
import google.auth.transport.requests as google_requests

from .errors import PushDeliveryError

logger = logging.getLogger(__name__)

FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")
FCM_TIMEOUT_SECONDS = float(os.environ.get("FCM_TIMEOUT_SECONDS", "5.0"))
SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]

_creds = None

def _get_credentials():
  global _creds
  if _creds is None:
    cred_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if not cred_path:
      raise RuntimeError("GOOGLE_APPLICATION_CREDENTIALS not set")
    _creds = service_account.Credentials.from_service_account_file(
      cred_path, scopes=SCOPES
    )
  return _creds

def _get_access_token() -> str:
  creds = _get_credentials()
  if not creds.valid:
    creds.refresh(google_requests.Request())
  return creds.token

def build_message(token: str, title: str, body: str) -> dict:
  return {
    "message": {
      "token": token,
      "notification": {
        "title": title,
        "body": body,
      },
      "android": {
        "priority": "high",
      },
    }
  }


class FcmPushSender:
  """Sends one notification per call through the FCM HTTP v1 API.

  With no project id configured the sender is disabled and only logs.
  """

  def __init__(
    self,
    project_id: Optional[str] = None,
    timeout: float = FCM_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
  ):
    self.project_id = FIREBASE_PROJECT_ID if project_id is None else project_id
    self.timeout = timeout
    self._transport = transport

  @property
  def url(self) -> str:
    return f"https://fcm.googleapis.com/v1/projects/{self.project_id}/messages:send"

  async def send(self, token: str, title: str, body: str) -> Optional[str]:
    """Returns the FCM message name, or None when FCM is disabled."""
    if not self.project_id:
      logger.warning("FCM disabled: FIREBASE_PROJECT_ID not set")
      return None

    try:
      # refresh is a blocking HTTP call
      access_token = await asyncio.to_thread(_get_access_token)
    except (google.auth.exceptions.GoogleAuthError, RuntimeError) as e:
      logger.warning("FCM auth error: %s", e)
      raise PushDeliveryError(f"FCM authentication failed: {e}") from e

    headers = {
      "Authorization": f"Bearer {access_token}",
      "Content-Type": "application/json; charset=utf-8",
    }

    try:
      async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
        r = await client.post(self.url, headers=headers, json=build_message(token, title, body))
    except httpx.HTTPError as e:
      logger.warning("FCM transport error: %s", e)
      raise PushDeliveryError(f"FCM request failed: {e}") from e

    if r.status_code >= 400:
      logger.warning("FCM send error: %s %s", r.status_code, r.text)
      raise PushDeliveryError(
        f"FCM rejected message ({r.status_code})",
        status_code=r.status_code,
        detail=r.text,
      )

    return r.json().get("name")
