from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from client.api_client import ApiClient
from client.errors import ApiError

logger = logging.getLogger(__name__)


class AuthService:
    """Register, login and logout; keeps the client's ClientSession in step."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.session = client.session

    def _start(self, envelope: Dict[str, Any]) -> Dict[str, Any]:
        data = envelope["data"]
        self.session.start(data["user"], data["tokens"])
        return data["user"]

    def register(self, email: str, password: str, name: str) -> Dict[str, Any]:
        envelope = self.client.post(
            "auth/register",
            json={"email": email, "password": password, "name": name},
            authenticated=False,
        )
        return self._start(envelope)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        envelope = self.client.post(
            "auth/login",
            json={"email": email, "password": password},
            authenticated=False,
        )
        return self._start(envelope)

    def refresh(self, refresh_token: str) -> Dict[str, str]:
        envelope = self.client.post(
            "auth/refresh",
            json={"refreshToken": refresh_token},
            authenticated=False,
        )
        return envelope["data"]["tokens"]

    def logout(self) -> None:
        """Local state is cleared even if the server call fails."""
        refresh_token = self.session.refresh_token
        try:
            if refresh_token:
                self.client.post("auth/logout", json={"refreshToken": refresh_token}, authenticated=False)
        except (ApiError, httpx.HTTPError) as exc:
            logger.error("Logout error: %s", exc)
        finally:
            self.session.end()


class TaskService:
    def __init__(self, client: ApiClient):
        self.client = client

    def list_tasks(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        envelope = self.client.get(
            "tasks",
            params={"page": page, "limit": limit, "status": status, "search": search or None},
        )
        return envelope["data"]

    def get_task(self, task_id: str) -> Dict[str, Any]:
        return self.client.get(f"tasks/{task_id}")["data"]

    def create_task(self, title: str, description: Optional[str] = None, status: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"title": title}
        if description is not None:
            body["description"] = description
        if status is not None:
            body["status"] = status
        return self.client.post("tasks", json=body)["data"]

    def update_task(self, task_id: str, **changes) -> Dict[str, Any]:
        return self.client.patch(f"tasks/{task_id}", json=changes)["data"]

    def delete_task(self, task_id: str) -> None:
        self.client.delete(f"tasks/{task_id}")

    def toggle_task_status(self, task_id: str) -> Dict[str, Any]:
        return self.client.patch(f"tasks/{task_id}/toggle")["data"]
