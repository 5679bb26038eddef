# notifications/push.py
import logging
from typing import Optional, Protocol

from .models import NotificationRequest, User

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
  async def get(self, user_id: str) -> Optional[User]: ...


class PushSender(Protocol):
  async def send(self, token: str, title: str, body: str) -> Optional[str]: ...


async def notify_user(
  users: UserDirectory,
  push: PushSender,
  user_id: str,
  title: str,
  body: str,
) -> Optional[NotificationRequest]:
  """Look up the user's device token and send one notification to it.

  Returns the request that was sent, or None when the user has no token.
  Errors from the lookup or the send are not caught here.
  """
  user = await users.get(user_id)
  if user is None:
    logger.info("skip push: user %s not found", user_id)
    return None
  if not user.fcm_token:
    logger.info("skip push: user %s has no device token", user_id)
    return None

  request = NotificationRequest(token=user.fcm_token, title=title, body=body)
  await push.send(request.token, request.title, request.body)
  logger.info(
    "push sent user_id=%s token_prefix=%s title=%r",
    user_id,
    request.token[:8],
    request.title,
  )
  return request
