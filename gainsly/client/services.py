"""
Gainsly Client - Services.

Typed wrappers over a ``Backend`` for auth, exercises and workouts. Keyword
arguments are snake_case; they are sent as the API's camelCase fields.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from pydantic.alias_generators import to_camel

from gainsly.client.backend import Backend
from gainsly.client.errors import ApiError, get_error_message
from gainsly.client.session import AuthState

logger = logging.getLogger(__name__)


def _body(fields: Dict[str, Any]) -> Dict[str, Any]:
    """camelCase the keys, drop unset values and send datetimes as ISO 8601."""
    return {
        to_camel(key): value.isoformat() if isinstance(value, datetime) else value
        for key, value in fields.items()
        if value is not None
    }


class AuthService:
    """Sign-in flows; every outcome is reflected in the ``AuthState``."""

    def __init__(self, backend: Backend, session: AuthState):
        self.backend = backend
        self.session = session

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        self.session.register_start()
        try:
            data = await self.backend.request(
                "POST",
                "/auth/register",
                json={"name": name, "email": email, "password": password},
                auth=False,
            )
        except Exception as e:
            self.session.register_failure(get_error_message(e))
            raise
        self.session.register_success(data["user"], data["token"], data["refresh_token"])
        return data

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        self.session.login_start()
        try:
            data = await self.backend.request(
                "POST",
                "/auth/login",
                json={"email": email, "password": password},
                auth=False,
            )
        except Exception as e:
            self.session.login_failure(get_error_message(e))
            raise
        self.session.login_success(data["user"], data["token"], data["refresh_token"])
        return data

    async def refresh(self) -> Dict[str, Any]:
        """Rotate the token pair explicitly."""
        if not self.session.refresh_token:
            raise ApiError(401, "No refresh token available")
        data = await self.backend.request(
            "POST",
            "/auth/refresh",
            json={"refresh_token": self.session.refresh_token},
            auth=False,
        )
        self.session.update_token(data["token"], data["refresh_token"])
        return data

    async def logout(self) -> None:
        """Revoke the refresh token on the server, then always clear the session."""
        try:
            if self.session.refresh_token:
                await self.backend.request(
                    "POST",
                    "/auth/logout",
                    json={"refresh_token": self.session.refresh_token},
                    auth=False,
                )
        except (ApiError, httpx.HTTPError) as e:
            logger.info(f"Server logout failed, clearing local session anyway: {e}")
        finally:
            self.session.logout()

    async def current_user(self) -> Dict[str, Any]:
        data = await self.backend.request("GET", "/auth/me")
        self.session.update_user(data["user"])
        return data["user"]

    async def update_profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> Dict[str, Any]:
        data = await self.backend.request(
            "PUT",
            "/users/profile",
            json=_body({"name": name, "email": email, "profile_picture": profile_picture}),
        )
        self.session.update_user(data["data"])
        return data["data"]

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self.backend.request(
            "PUT",
            "/users/password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def restore_session(self) -> bool:
        """
        Confirm stored tokens against the API.

        Returns:
            bool: True if the session is valid; otherwise it is cleared.
        """
        if not self.session.token:
            return False
        try:
            user = await self.current_user()
        except ApiError:
            self.session.logout()
            return False
        self.session.login_success(user, self.session.token, self.session.refresh_token)
        return True


class ExerciseService:
    """Exercise catalogue calls."""

    def __init__(self, backend: Backend):
        self.backend = backend

    async def list(self) -> List[Dict[str, Any]]:
        return (await self.backend.request("GET", "/exercises"))["data"]

    async def get(self, exercise_id: str) -> Dict[str, Any]:
        return (await self.backend.request("GET", f"/exercises/{exercise_id}"))["data"]

    async def create(
        self,
        name: str,
        muscle_group: str,
        description: str = "",
        image_url: str = "",
    ) -> Dict[str, Any]:
        body = _body({
            "name": name,
            "muscle_group": muscle_group,
            "description": description,
            "image_url": image_url,
        })
        return (await self.backend.request("POST", "/exercises", json=body))["data"]

    async def update(self, exercise_id: str, **fields: Any) -> Dict[str, Any]:
        response = await self.backend.request("PUT", f"/exercises/{exercise_id}", json=_body(fields))
        return response["data"]

    async def delete(self, exercise_id: str) -> None:
        await self.backend.request("DELETE", f"/exercises/{exercise_id}")

    async def search(self, query: str) -> List[Dict[str, Any]]:
        response = await self.backend.request(
            "GET", "/exercises/search", params={"query": query}, auth=False
        )
        return response["data"]


class WorkoutService:
    """Workout, set and template calls."""

    def __init__(self, backend: Backend):
        self.backend = backend

    async def list(self) -> List[Dict[str, Any]]:
        return (await self.backend.request("GET", "/workouts"))["data"]

    async def get(self, workout_id: str) -> Dict[str, Any]:
        return (await self.backend.request("GET", f"/workouts/{workout_id}"))["data"]

    async def create(
        self,
        name: str,
        description: str = "",
        exercises: Optional[List[str]] = None,
        is_template: bool = False,
        **fields: Any,
    ) -> Dict[str, Any]:
        body = _body({
            "name": name,
            "description": description,
            "exercises": exercises or [],
            "is_template": is_template,
            **fields,
        })
        return (await self.backend.request("POST", "/workouts", json=body))["data"]

    async def update(self, workout_id: str, **fields: Any) -> Dict[str, Any]:
        response = await self.backend.request("PUT", f"/workouts/{workout_id}", json=_body(fields))
        return response["data"]

    async def delete(self, workout_id: str) -> None:
        await self.backend.request("DELETE", f"/workouts/{workout_id}")

    async def add_set(
        self,
        workout_id: str,
        exercise_id: str,
        reps: int,
        weight: float,
    ) -> Dict[str, Any]:
        body = {"exerciseId": exercise_id, "reps": reps, "weight": weight}
        return (await self.backend.request("POST", f"/workouts/{workout_id}/sets", json=body))["data"]

    async def update_set(self, set_id: str, **fields: Any) -> Dict[str, Any]:
        response = await self.backend.request("PUT", f"/workouts/sets/{set_id}", json=_body(fields))
        return response["data"]

    async def delete_set(self, set_id: str) -> None:
        await self.backend.request("DELETE", f"/workouts/sets/{set_id}")

    async def list_templates(self) -> List[Dict[str, Any]]:
        return (await self.backend.request("GET", "/workouts/templates"))["data"]

    async def create_from_template(self, template_id: str) -> Dict[str, Any]:
        return (await self.backend.request("POST", f"/workouts/templates/{template_id}"))["data"]
