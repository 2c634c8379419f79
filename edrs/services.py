"""
Resource services for the EDRS REST API.

Each service is a thin wrapper over ``ApiClient`` returning decoded JSON.
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from edrs.client import ApiClient


def _json(response: requests.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


class _Service:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthService(_Service):
    def login(self, credentials: dict) -> dict:
        """Log in and keep the returned token and user in the session store."""
        payload = _json(self.client.post("/auth/login/", json=credentials))
        self._remember(payload)
        return payload

    def register(self, user_data: dict) -> dict:
        payload = _json(self.client.post("/auth/register/", json=user_data))
        self._remember(payload)
        return payload

    def logout(self) -> Any:
        try:
            return _json(self.client.post("/auth/logout/"))
        finally:
            self.client.session.clear()

    def get_user(self) -> dict:
        user = _json(self.client.get("/auth/user/"))
        self.client.session.set_user(user)
        return user

    def change_password(self, password_data: dict) -> Any:
        return _json(self.client.post("/auth/change-password/", json=password_data))

    def reset_password(self, email: str) -> Any:
        return _json(self.client.post("/auth/password-reset/", json={"email": email}))

    def confirm_password_reset(self, data: dict) -> Any:
        return _json(self.client.post("/auth/password-reset-confirm/", json=data))

    def _remember(self, payload: Optional[dict]) -> None:
        if not isinstance(payload, dict):
            return
        token = payload.get("token")
        if token:
            self.client.session.set_token(token)
        if payload.get("user") is not None:
            self.client.session.set_user(payload["user"])


class UserService(_Service):
    def get_users(self, params: Optional[dict] = None) -> Any:
        return _json(self.client.get("/users/", params=params or {}))

    def get_user(self, user_id) -> Any:
        return _json(self.client.get(f"/users/{user_id}/"))

    def update_user(self, user_id, user_data: dict) -> Any:
        return _json(self.client.put(f"/users/{user_id}/", json=user_data))

    def delete_user(self, user_id) -> Any:
        return _json(self.client.delete(f"/users/{user_id}/"))

    def get_profile(self) -> Any:
        return _json(self.client.get("/users/profile/"))

    def update_profile(self, user_data: dict) -> Any:
        return _json(self.client.put("/users/profile/update/", json=user_data))


class _SlugResource(_Service):
    """CRUD over ``/core/<collection>/<key>/``."""

    collection: str = ""

    def _path(self, key=None) -> str:
        if key is None:
            return f"/core/{self.collection}/"
        return f"/core/{self.collection}/{key}/"

    def list(self, params: Optional[dict] = None) -> Any:
        return _json(self.client.get(self._path(), params=params or {}))

    def get(self, key) -> Any:
        return _json(self.client.get(self._path(key)))

    def create(self, data: dict) -> Any:
        return _json(self.client.post(self._path(), json=data))

    def update(self, key, data: dict) -> Any:
        return _json(self.client.put(self._path(key), json=data))

    def delete(self, key) -> Any:
        return _json(self.client.delete(self._path(key)))


class PostService(_SlugResource):
    collection = "posts"


class CategoryService(_SlugResource):
    collection = "categories"


class TagService(_SlugResource):
    collection = "tags"


class DashboardService(_Service):
    def get_stats(self) -> Any:
        return _json(self.client.get("/core/dashboard/stats/"))


class AnalyticsService(_Service):
    def track(self, event_data: dict) -> Any:
        return _json(self.client.post("/core/analytics/track/", json=event_data))

    def log_activity(self, activity_data: dict) -> Any:
        return _json(self.client.post("/core/activity/log/", json=activity_data))
