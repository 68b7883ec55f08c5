"""
Gainsly API - Workout Schemas.

Pydantic schemas for workouts, sets and templates.
"""

from datetime import datetime
from typing import Annotated, List, Optional, Union

from beanie import PydanticObjectId
from pydantic import ConfigDict, Field, StringConstraints

from gainsly.models.mongodb import WorkoutDocument, WorkoutSetDocument
from gainsly.schemas.base import APIModel
from gainsly.schemas.exercise import ExerciseOut


WorkoutName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class WorkoutCreate(APIModel):
    """
    Schema for workout creation request.

    Attributes:
        name: Workout name (required, max 50 characters).
        description: Optional description (max 500 characters).
        exercises: Exercise ids planned for the workout.
        is_template: Whether the workout is a reusable template.
        date: Workout date (defaults to now).
        duration: Duration in minutes.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Push Day",
                "description": "Chest, shoulders, triceps",
                "exercises": [],
                "isTemplate": False
            }
        }
    )

    name: WorkoutName = Field(..., description="Workout name")
    description: str = Field(default="", max_length=500)
    exercises: List[PydanticObjectId] = Field(default_factory=list)
    is_template: bool = False
    date: Optional[datetime] = None
    duration: int = Field(default=0, ge=0)


class WorkoutUpdate(APIModel):
    """Schema for workout update request. Only supplied fields change."""

    name: Optional[WorkoutName] = None
    description: Optional[str] = Field(default=None, max_length=500)
    exercises: Optional[List[PydanticObjectId]] = None
    date: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)
    completed: Optional[bool] = None
    is_template: Optional[bool] = None


class SetCreate(APIModel):
    """
    Schema for adding a set to a workout.

    Attributes:
        exercise_id: Exercise performed.
        reps: Repetitions (at least 1).
        weight: Load (zero for bodyweight).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"exerciseId": "65f1c0ffee0000000000beef", "reps": 10, "weight": 100}
        }
    )

    exercise_id: PydanticObjectId
    reps: int = Field(..., ge=1)
    weight: float = Field(..., ge=0)


class SetUpdate(APIModel):
    """Schema for set update request."""

    reps: Optional[int] = Field(default=None, ge=1)
    weight: Optional[float] = Field(default=None, ge=0)
    completed: Optional[bool] = None


class WorkoutSetOut(APIModel):
    """Set as returned by the API."""

    id: str
    workout_id: str
    exercise_id: str
    reps: int
    weight: float
    completed: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, workout_set: WorkoutSetDocument) -> "WorkoutSetOut":
        return cls(
            id=str(workout_set.id),
            workout_id=str(workout_set.workout_id),
            exercise_id=str(workout_set.exercise_id),
            reps=workout_set.reps,
            weight=workout_set.weight,
            completed=workout_set.completed,
            created_at=workout_set.created_at,
            updated_at=workout_set.updated_at,
        )


class WorkoutOut(APIModel):
    """
    Workout as returned by the API.

    ``exercises`` and ``sets`` hold full objects when populated, otherwise ids.
    """

    id: str
    user_id: str
    name: str
    description: str
    exercises: List[Union[ExerciseOut, str]]
    sets: List[Union[WorkoutSetOut, str]]
    date: datetime
    duration: int
    completed: bool
    is_template: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(
        cls,
        workout: WorkoutDocument,
        exercises: Optional[List[ExerciseOut]] = None,
        sets: Optional[List[WorkoutSetOut]] = None,
    ) -> "WorkoutOut":
        return cls(
            id=str(workout.id),
            user_id=str(workout.user_id),
            name=workout.name,
            description=workout.description,
            exercises=exercises if exercises is not None else [str(e) for e in workout.exercises],
            sets=sets if sets is not None else [str(s) for s in workout.sets],
            date=workout.date,
            duration=workout.duration,
            completed=workout.completed,
            is_template=workout.is_template,
            created_at=workout.created_at,
            updated_at=workout.updated_at,
        )
