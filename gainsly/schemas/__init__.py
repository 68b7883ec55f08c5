"""Gainsly API - Pydantic Schemas Package."""

from gainsly.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshRequest,
    UserOut,
    AuthResponse,
    TokenPairResponse,
)
from gainsly.schemas.user import (
    UserUpdate,
    ChangePasswordRequest,
)
from gainsly.schemas.exercise import (
    ExerciseCreate,
    ExerciseUpdate,
    ExerciseOut,
)
from gainsly.schemas.workout import (
    WorkoutCreate,
    WorkoutUpdate,
    SetCreate,
    SetUpdate,
    WorkoutSetOut,
    WorkoutOut,
)

__all__ = [
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "RefreshRequest",
    "UserOut",
    "AuthResponse",
    "TokenPairResponse",
    # User
    "UserUpdate",
    "ChangePasswordRequest",
    # Exercise
    "ExerciseCreate",
    "ExerciseUpdate",
    "ExerciseOut",
    # Workout
    "WorkoutCreate",
    "WorkoutUpdate",
    "SetCreate",
    "SetUpdate",
    "WorkoutSetOut",
    "WorkoutOut",
]
