#!/usr/bin/env python
"""
Manual smoke test against a running notifier.

Registers a device token for a throwaway user, then fires the three
document triggers for that user. With FIREBASE_PROJECT_ID unset on the
server the sends are only logged, so this is safe to run locally.

    TASKPUSH_DEVICE_TOKEN=<real token> python live_trigger_smoke.py
"""
import os
import sys
import uuid
from typing import Any, Dict

import requests

BASE_URL = os.getenv("TASKPUSH_BASE_URL", "http://localhost:8000")
DEVICE_TOKEN = os.getenv("TASKPUSH_DEVICE_TOKEN", f"live-test-{uuid.uuid4()}")


def register_token(user_id: str) -> None:
    resp = requests.put(
        f"{BASE_URL}/v1/users/{user_id}/push/token",
        json={"device_token": DEVICE_TOKEN},
    )
    print("REGISTER TOKEN status:", resp.status_code, resp.text)
    resp.raise_for_status()


def fire(path: str, payload: Dict[str, Any]) -> bool:
    resp = requests.post(f"{BASE_URL}{path}", json=payload)
    print(f"POST {path} status:", resp.status_code, resp.text)
    resp.raise_for_status()
    return resp.json()["notified"]


def main():
    user_id = f"live-user-{uuid.uuid4()}"
    task_id = str(uuid.uuid4())
    print(f"Using BASE_URL={BASE_URL}")
    print(f"Using user_id={user_id}")

    register_token(user_id)

    task = {
        "title": "Live smoke task",
        "status": "open",
        "assignedTo": user_id,
        "assignedBy": user_id,
    }
    results = {
        "assigned": fire(f"/v1/triggers/tasks/{task_id}/created", task),
        "completed": fire(
            f"/v1/triggers/tasks/{task_id}/updated",
            {"before": task, "after": dict(task, status="completed")},
        ),
        "chat": fire(
            f"/v1/triggers/chats/live-chat/messages/{uuid.uuid4()}/created",
            {"senderName": "Smoke", "text": "ping", "receiverId": user_id},
        ),
    }

    failed = [name for name, notified in results.items() if not notified]
    if failed:
        print(f"[FAIL] No notification for: {', '.join(failed)}")
        sys.exit(1)

    print("\n[OK] All three triggers notified.")
    sys.exit(0)


if __name__ == "__main__":
    main()
