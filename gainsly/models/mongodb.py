# gainsly/models/mongodb.py
"""
Gainsly MongoDB Document Models.

Beanie ODM models for MongoDB.
"""

from datetime import datetime, timezone
from typing import List, Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import EmailStr, Field
from pymongo import ASCENDING, IndexModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserDocument(Document):
    """User model for MongoDB. ``password_hash`` never leaves the API."""

    name: str
    email: Indexed(EmailStr, unique=True)
    password_hash: str
    profile_picture: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "users"


class ExerciseDocument(Document):
    """Exercise catalogue entry. Global, no owner."""

    name: str
    muscle_group: str
    description: str = ""
    image_url: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "exercises"
        indexes = [
            "name",
            "muscle_group",
        ]


class WorkoutDocument(Document):
    """
    Workout owned by a user.

    ``exercises`` and ``sets`` hold ids of ExerciseDocument and
    WorkoutSetDocument. Workouts with ``is_template`` set are blueprints
    that get copied by create-from-template.
    """

    user_id: PydanticObjectId
    name: str = Field(..., max_length=50)
    description: str = Field(default="", max_length=500)
    exercises: List[PydanticObjectId] = Field(default_factory=list)
    sets: List[PydanticObjectId] = Field(default_factory=list)
    date: datetime = Field(default_factory=utcnow)
    duration: int = 0  # minutes
    completed: bool = False
    is_template: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "workouts"
        indexes = [
            "user_id",
            "is_template",
        ]


class WorkoutSetDocument(Document):
    """One logged set; ``workout_id`` points back at the owning workout."""

    workout_id: PydanticObjectId
    exercise_id: PydanticObjectId
    reps: int = Field(..., ge=1)
    weight: float = Field(..., ge=0)
    completed: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "workout_sets"
        indexes = [
            "workout_id",
        ]


class RefreshTokenDocument(Document):
    """Persisted refresh token. MongoDB drops it once ``expires_at`` passes."""

    user_id: PydanticObjectId
    token: Indexed(str, unique=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "tokens"
        indexes = [
            "user_id",
            IndexModel([("expires_at", ASCENDING)], expireAfterSeconds=0),
        ]


DOCUMENT_MODELS = [
    UserDocument,
    ExerciseDocument,
    WorkoutDocument,
    WorkoutSetDocument,
    RefreshTokenDocument,
]
