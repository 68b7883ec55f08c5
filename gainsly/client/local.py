"""
Gainsly Client - Local Backend.

Offline stand-in for the API. Users, tokens, exercises, workouts and sets
live in one JSON file that is seeded with the default exercise catalogue.
Answers use the same envelopes, ordering, ownership rules and error
statuses as the server, and request bodies are checked with the server's
own schemas.
"""

import copy
import json
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import bcrypt
from bson import ObjectId
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from gainsly.client.backend import Backend
from gainsly.client.errors import ApiError
from gainsly.client.session import AuthState
from gainsly.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest
from gainsly.schemas.base import first_error_message
from gainsly.schemas.exercise import ExerciseCreate, ExerciseUpdate
from gainsly.schemas.user import ChangePasswordRequest, UserUpdate
from gainsly.schemas.workout import SetCreate, SetUpdate, WorkoutCreate, WorkoutUpdate
from gainsly.services.exercise_catalog import get_default_exercises

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "access_tokens", "refresh_tokens", "exercises", "workouts", "sets")
PATH_ID = r"([^/]+)"
REFRESH_PATH = "/auth/refresh"
ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=7)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _new_id() -> str:
    return str(ObjectId())


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt()).decode("utf-8")


def _check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        return False


def _camel(changes: Dict[str, Any]) -> Dict[str, Any]:
    converted = {}
    for key, value in changes.items():
        if isinstance(value, datetime):
            value = _iso(value)
        elif isinstance(value, list):
            value = [str(item) for item in value]
        converted[to_camel(key)] = value
    return converted


class LocalBackend(Backend):
    """
    Backend that keeps all data in a JSON file.

    Access tokens expire and are dropped on refresh, logout and password
    change. A 401 on a signed-in call gets one silent refresh and a retry,
    the same as against the real API.

    Args:
        path: Location of the JSON store; created and seeded if missing.
        session: Auth state whose access token identifies the caller.
        access_token_ttl: Lifetime of issued access tokens.
        refresh_token_ttl: Lifetime of issued refresh tokens.
    """

    def __init__(
        self,
        path: str,
        session: Optional[AuthState] = None,
        access_token_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_token_ttl: timedelta = REFRESH_TOKEN_TTL,
    ):
        self.path = Path(path)
        self.session = session or AuthState()
        self.access_token_ttl = access_token_ttl
        self.refresh_token_ttl = refresh_token_ttl
        self.data = self._load()
        routes = [
            ("POST", "/auth/register", self._register),
            ("POST", "/auth/login", self._login),
            ("POST", "/auth/refresh", self._refresh),
            ("POST", "/auth/logout", self._logout),
            ("GET", "/auth/me", self._me),
            ("GET", "/users/profile", self._get_profile),
            ("PUT", "/users/profile", self._update_profile),
            ("PUT", "/users/password", self._change_password),
            ("GET", "/exercises/search", self._search_exercises),
            ("GET", "/exercises", self._list_exercises),
            ("POST", "/exercises", self._create_exercise),
            ("GET", f"/exercises/{PATH_ID}", self._get_exercise),
            ("PUT", f"/exercises/{PATH_ID}", self._update_exercise),
            ("DELETE", f"/exercises/{PATH_ID}", self._delete_exercise),
            ("GET", "/workouts/templates", self._list_templates),
            ("POST", f"/workouts/templates/{PATH_ID}", self._create_from_template),
            ("PUT", f"/workouts/sets/{PATH_ID}", self._update_set),
            ("DELETE", f"/workouts/sets/{PATH_ID}", self._delete_set),
            ("GET", "/workouts", self._list_workouts),
            ("POST", "/workouts", self._create_workout),
            ("GET", f"/workouts/{PATH_ID}", self._get_workout),
            ("PUT", f"/workouts/{PATH_ID}", self._update_workout),
            ("DELETE", f"/workouts/{PATH_ID}", self._delete_workout),
            ("POST", f"/workouts/{PATH_ID}/sets", self._add_set),
        ]
        self.routes: List[Tuple[str, "re.Pattern[str]", Callable]] = [
            (method, re.compile(pattern), handler) for method, pattern, handler in routes
        ]

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> Dict[str, Any]:
        method = method.upper()
        path = "/" + path.strip("/")
        try:
            return self._dispatch(method, path, json or {}, params or {})
        except ApiError as e:
            if e.status_code != 401 or not auth or path == REFRESH_PATH:
                raise
            if not self._refresh_session():
                self.session.logout()
                raise
        return self._dispatch(method, path, json or {}, params or {})

    def _dispatch(
        self,
        method: str,
        path: str,
        body: Dict[str, Any],
        params: Dict[str, Any],
    ) -> Dict[str, Any]:
        for route_method, pattern, handler in self.routes:
            match = pattern.fullmatch(path)
            if route_method == method and match:
                result = handler(body, params, *match.groups())
                if method != "GET":
                    self._save()
                return copy.deepcopy(result)
        raise ApiError(404, f"Not Found - {path}")

    def _refresh_session(self) -> bool:
        if not self.session.refresh_token:
            return False
        try:
            data = self._refresh({"refresh_token": self.session.refresh_token}, {})
        except ApiError as e:
            logger.info(f"Local token refresh rejected: {e.message}")
            return False
        finally:
            self._save()
        self.session.update_token(data["token"], data["refresh_token"])
        return True

    # Storage

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if self.path.exists():
            data = json.loads(self.path.read_text())
            for name in COLLECTIONS:
                data.setdefault(name, {})
            return data

        data: Dict[str, Dict[str, Any]] = {name: {} for name in COLLECTIONS}
        for entry in get_default_exercises():
            record = self._exercise_record(entry)
            data["exercises"][record["id"]] = record
        logger.info(f"Created local store at {self.path} with {len(data['exercises'])} exercises")
        self.data = data
        self._save()
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.data, indent=2))

    @staticmethod
    def _exercise_record(fields: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        return {
            "id": _new_id(),
            "name": fields["name"],
            "muscleGroup": fields["muscle_group"],
            "description": fields.get("description") or "",
            "imageUrl": fields.get("image_url") or "",
            "createdAt": now,
            "updatedAt": now,
        }

    @staticmethod
    def _validate(schema: Type[BaseModel], body: Dict[str, Any]) -> Any:
        try:
            return schema.model_validate(body)
        except PydanticValidationError as e:
            raise ApiError(400, first_error_message(e.errors()))

    # Auth helpers

    @staticmethod
    def _expired(record: Dict[str, Any]) -> bool:
        return datetime.fromisoformat(record["expiresAt"]) <= datetime.now(timezone.utc)

    def _current_user(self) -> Dict[str, Any]:
        token = self.session.token or ""
        record = self.data["access_tokens"].get(token)
        if record and self._expired(record):
            del self.data["access_tokens"][token]
            record = None
        user = self.data["users"].get(record["userId"]) if record else None
        if not user:
            raise ApiError(401, "Not authorized to access this route")
        return user

    @staticmethod
    def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": user["id"],
            "name": user["name"],
            "email": user["email"],
            "profilePicture": user.get("profilePicture"),
        }

    def _issue_tokens(self, user: Dict[str, Any]) -> Tuple[str, str]:
        """Mint a pair; the refresh record remembers its access token so rotation can drop it."""
        now = datetime.now(timezone.utc)
        token = secrets.token_urlsafe(32)
        refresh_token = secrets.token_urlsafe(32)
        self.data["access_tokens"][token] = {
            "userId": user["id"],
            "expiresAt": (now + self.access_token_ttl).isoformat(),
        }
        self.data["refresh_tokens"][refresh_token] = {
            "userId": user["id"],
            "accessToken": token,
            "expiresAt": (now + self.refresh_token_ttl).isoformat(),
        }
        return token, refresh_token

    def _revoke_tokens(self, user_id: str) -> None:
        for name in ("access_tokens", "refresh_tokens"):
            self.data[name] = {
                token: record for token, record in self.data[name].items()
                if record["userId"] != user_id
            }

    def _find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        for user in self.data["users"].values():
            if user["email"] == email:
                return user
        return None

    # Auth

    def _register(self, body, params):
        payload = self._validate(RegisterRequest, body)
        email = payload.email.lower()
        if self._find_user_by_email(email):
            raise ApiError(409, "User already exists")

        now = _now()
        user = {
            "id": _new_id(),
            "name": payload.name,
            "email": email,
            "passwordHash": _hash_password(payload.password),
            "profilePicture": None,
            "createdAt": now,
            "updatedAt": now,
        }
        self.data["users"][user["id"]] = user
        token, refresh_token = self._issue_tokens(user)
        return {
            "success": True,
            "user": self._public_user(user),
            "token": token,
            "refresh_token": refresh_token,
        }

    def _login(self, body, params):
        payload = self._validate(LoginRequest, body)
        user = self._find_user_by_email(payload.email.lower())
        if not user or not _check_password(payload.password, user["passwordHash"]):
            raise ApiError(401, "Invalid credentials")
        token, refresh_token = self._issue_tokens(user)
        return {
            "success": True,
            "user": self._public_user(user),
            "token": token,
            "refresh_token": refresh_token,
        }

    def _refresh(self, body, params):
        payload = self._validate(RefreshRequest, body)
        record = self.data["refresh_tokens"].pop(payload.refresh_token, None)
        if not record or self._expired(record):
            raise ApiError(401, "Invalid refresh token")
        self.data["access_tokens"].pop(record["accessToken"], None)
        user = self.data["users"].get(record["userId"])
        if not user:
            raise ApiError(401, "User not found")
        token, refresh_token = self._issue_tokens(user)
        return {"success": True, "token": token, "refresh_token": refresh_token}

    def _logout(self, body, params):
        payload = self._validate(RefreshRequest, body)
        record = self.data["refresh_tokens"].get(payload.refresh_token)
        if record:
            self._revoke_tokens(record["userId"])
        return {"success": True, "message": "Logged out successfully"}

    def _me(self, body, params):
        return {"success": True, "user": self._public_user(self._current_user())}

    # Users

    def _get_profile(self, body, params):
        return {"success": True, "data": self._public_user(self._current_user())}

    def _update_profile(self, body, params):
        user = self._current_user()
        payload = self._validate(UserUpdate, body)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ApiError(400, "Please provide at least one field to update")

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            other = self._find_user_by_email(changes["email"])
            if other and other["id"] != user["id"]:
                raise ApiError(409, "Email is already in use")

        user.update(_camel(changes))
        user["updatedAt"] = _now()
        return {"success": True, "data": self._public_user(user)}

    def _change_password(self, body, params):
        user = self._current_user()
        payload = self._validate(ChangePasswordRequest, body)
        if not _check_password(payload.current_password, user["passwordHash"]):
            raise ApiError(400, "Current password is incorrect")

        user["passwordHash"] = _hash_password(payload.new_password)
        user["updatedAt"] = _now()
        self._revoke_tokens(user["id"])
        return {"success": True, "message": "Password updated successfully"}

    # Exercises

    def _sorted_exercises(self, predicate=None) -> Dict[str, Any]:
        exercises = [e for e in self.data["exercises"].values() if predicate is None or predicate(e)]
        exercises.sort(key=lambda e: e["name"])
        return {"success": True, "count": len(exercises), "data": exercises}

    def _get_exercise_record(self, exercise_id: str) -> Dict[str, Any]:
        exercise = self.data["exercises"].get(exercise_id)
        if not exercise:
            raise ApiError(404, "Exercise not found")
        return exercise

    def _search_exercises(self, body, params):
        term = str(params.get("query") or "").strip().lower()
        if not term:
            return self._sorted_exercises()
        return self._sorted_exercises(
            lambda e: term in e["name"].lower() or term in e["muscleGroup"].lower()
        )

    def _list_exercises(self, body, params):
        self._current_user()
        return self._sorted_exercises()

    def _get_exercise(self, body, params, exercise_id):
        self._current_user()
        return {"success": True, "data": self._get_exercise_record(exercise_id)}

    def _create_exercise(self, body, params):
        self._current_user()
        payload = self._validate(ExerciseCreate, body)
        record = self._exercise_record(payload.model_dump())
        self.data["exercises"][record["id"]] = record
        return {"success": True, "data": record}

    def _update_exercise(self, body, params, exercise_id):
        self._current_user()
        exercise = self._get_exercise_record(exercise_id)
        payload = self._validate(ExerciseUpdate, body)
        exercise.update(_camel(payload.model_dump(exclude_unset=True, exclude_none=True)))
        exercise["updatedAt"] = _now()
        return {"success": True, "data": exercise}

    def _delete_exercise(self, body, params, exercise_id):
        self._current_user()
        self._get_exercise_record(exercise_id)
        in_use = any(exercise_id in w["exercises"] for w in self.data["workouts"].values()) or any(
            s["exerciseId"] == exercise_id for s in self.data["sets"].values()
        )
        if in_use:
            raise ApiError(409, "Exercise is used in workouts and cannot be deleted")
        del self.data["exercises"][exercise_id]
        return {"success": True, "data": {}}

    # Workouts

    def _owned_workout(
        self,
        workout_id: str,
        user: Dict[str, Any],
        action: str = "access this workout",
        resource: str = "Workout",
    ) -> Dict[str, Any]:
        workout = self.data["workouts"].get(workout_id)
        if not workout:
            raise ApiError(404, f"{resource} not found")
        if workout["userId"] != user["id"]:
            raise ApiError(401, f"You are not authorized to {action}")
        return workout

    def _ensure_exercises(self, exercise_ids: List[str]) -> None:
        for exercise_id in exercise_ids:
            if exercise_id not in self.data["exercises"]:
                raise ApiError(404, "Exercise not found")

    def _populate(self, workout: Dict[str, Any], include_sets: bool = True) -> Dict[str, Any]:
        exercises = self.data["exercises"]
        sets = self.data["sets"]
        populated = dict(workout)
        populated["exercises"] = [exercises[e] for e in workout["exercises"] if e in exercises]
        if include_sets:
            populated["sets"] = [sets[s] for s in workout["sets"] if s in sets]
        else:
            populated["sets"] = list(workout["sets"])
        return populated

    def _user_workouts(self, user: Dict[str, Any], templates_only: bool = False) -> List[Dict[str, Any]]:
        return [
            w for w in self.data["workouts"].values()
            if w["userId"] == user["id"] and (w["isTemplate"] or not templates_only)
        ]

    def _listing(self, workouts: List[Dict[str, Any]]) -> Dict[str, Any]:
        data = [self._populate(w, include_sets=False) for w in workouts]
        return {"success": True, "count": len(data), "data": data}

    def _new_workout(self, user: Dict[str, Any], **fields) -> Dict[str, Any]:
        now = _now()
        workout = {
            "id": _new_id(),
            "userId": user["id"],
            "name": fields["name"],
            "description": fields.get("description", ""),
            "exercises": list(fields.get("exercises", [])),
            "sets": [],
            "date": fields.get("date") or now,
            "duration": fields.get("duration", 0),
            "completed": False,
            "isTemplate": fields.get("is_template", False),
            "createdAt": now,
            "updatedAt": now,
        }
        self.data["workouts"][workout["id"]] = workout
        return workout

    def _new_set(self, workout: Dict[str, Any], exercise_id: str, reps: int, weight: float) -> Dict[str, Any]:
        now = _now()
        workout_set = {
            "id": _new_id(),
            "workoutId": workout["id"],
            "exerciseId": exercise_id,
            "reps": reps,
            "weight": weight,
            "completed": False,
            "createdAt": now,
            "updatedAt": now,
        }
        self.data["sets"][workout_set["id"]] = workout_set
        workout["sets"].append(workout_set["id"])
        return workout_set

    def _list_workouts(self, body, params):
        workouts = self._user_workouts(self._current_user())
        workouts.sort(key=lambda w: datetime.fromisoformat(w["date"]), reverse=True)
        return self._listing(workouts)

    def _list_templates(self, body, params):
        templates = self._user_workouts(self._current_user(), templates_only=True)
        templates.sort(key=lambda w: w["name"])
        return self._listing(templates)

    def _get_workout(self, body, params, workout_id):
        workout = self._owned_workout(workout_id, self._current_user())
        return {"success": True, "data": self._populate(workout)}

    def _create_workout(self, body, params):
        user = self._current_user()
        payload = self._validate(WorkoutCreate, body)
        exercise_ids = [str(e) for e in payload.exercises]
        self._ensure_exercises(exercise_ids)
        workout = self._new_workout(
            user,
            name=payload.name,
            description=payload.description,
            exercises=exercise_ids,
            date=_iso(payload.date) if payload.date else None,
            duration=payload.duration,
            is_template=payload.is_template,
        )
        return {"success": True, "data": self._populate(workout)}

    def _update_workout(self, body, params, workout_id):
        user = self._current_user()
        workout = self._owned_workout(workout_id, user, action="update this workout")
        payload = self._validate(WorkoutUpdate, body)
        changes = _camel(payload.model_dump(exclude_unset=True, exclude_none=True))
        if "exercises" in changes:
            self._ensure_exercises(changes["exercises"])
        workout.update(changes)
        workout["updatedAt"] = _now()
        return {"success": True, "data": self._populate(workout)}

    def _delete_workout(self, body, params, workout_id):
        user = self._current_user()
        workout = self._owned_workout(workout_id, user, action="delete this workout")
        self.data["sets"] = {
            set_id: s for set_id, s in self.data["sets"].items()
            if s["workoutId"] != workout_id and set_id not in workout["sets"]
        }
        del self.data["workouts"][workout_id]
        return {"success": True, "data": {}}

    def _add_set(self, body, params, workout_id):
        user = self._current_user()
        workout = self._owned_workout(workout_id, user, action="update this workout")
        payload = self._validate(SetCreate, body)
        exercise_id = str(payload.exercise_id)
        self._ensure_exercises([exercise_id])

        workout_set = self._new_set(workout, exercise_id, payload.reps, payload.weight)
        if exercise_id not in workout["exercises"]:
            workout["exercises"].append(exercise_id)
        workout["updatedAt"] = _now()
        return {"success": True, "data": workout_set}

    def _owned_set(self, set_id: str, action: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        user = self._current_user()
        workout_set = self.data["sets"].get(set_id)
        if not workout_set:
            raise ApiError(404, "Set not found")
        workout = self.data["workouts"].get(workout_set["workoutId"])
        if not workout or set_id not in workout["sets"]:
            raise ApiError(404, "Workout containing this set not found")
        if workout["userId"] != user["id"]:
            raise ApiError(401, f"You are not authorized to {action}")
        return workout_set, workout

    def _update_set(self, body, params, set_id):
        workout_set, _ = self._owned_set(set_id, "update this set")
        payload = self._validate(SetUpdate, body)
        workout_set.update(_camel(payload.model_dump(exclude_unset=True, exclude_none=True)))
        workout_set["updatedAt"] = _now()
        return {"success": True, "data": workout_set}

    def _delete_set(self, body, params, set_id):
        workout_set, workout = self._owned_set(set_id, "delete this set")
        workout["sets"] = [s for s in workout["sets"] if s != set_id]
        workout["updatedAt"] = _now()
        del self.data["sets"][set_id]
        return {"success": True, "data": {}}

    def _create_from_template(self, body, params, template_id):
        user = self._current_user()
        template = self._owned_workout(
            template_id, user, action="use this template", resource="Template"
        )
        if not template["isTemplate"]:
            raise ApiError(400, "This workout is not a template")

        workout = self._new_workout(
            user,
            name=template["name"],
            description=template["description"],
            exercises=template["exercises"],
        )
        for set_id in template["sets"]:
            original = self.data["sets"].get(set_id)
            if original is None:
                continue
            self._new_set(workout, original["exerciseId"], original["reps"], original["weight"])
        return {"success": True, "data": self._populate(workout)}
