# notifications/errors.py
from typing import Optional


class PushDeliveryError(Exception):
    """The push gateway rejected the message or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
