"""
Gainsly API - Exercise Schemas.

Pydantic schemas for the exercise catalogue.
"""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from gainsly.models.mongodb import ExerciseDocument
from gainsly.schemas.base import APIModel, NonEmptyStr


class ExerciseCreate(APIModel):
    """
    Schema for exercise creation request.

    Attributes:
        name: Exercise name.
        muscle_group: Primary muscle group.
        description: Free-form description.
        image_url: Illustration URL.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Bench Press",
                "muscleGroup": "Chest",
                "description": "Compound press for chest, shoulders and triceps",
                "imageUrl": ""
            }
        }
    )

    name: NonEmptyStr = Field(..., description="Exercise name")
    muscle_group: NonEmptyStr = Field(..., description="Primary muscle group")
    description: str = ""
    image_url: str = ""


class ExerciseUpdate(APIModel):
    """Schema for exercise update request. Only supplied fields change."""

    name: Optional[NonEmptyStr] = None
    muscle_group: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class ExerciseOut(APIModel):
    """Exercise as returned by the API."""

    id: str
    name: str
    muscle_group: str
    description: str = ""
    image_url: str = ""
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, exercise: ExerciseDocument) -> "ExerciseOut":
        return cls(
            id=str(exercise.id),
            name=exercise.name,
            muscle_group=exercise.muscle_group,
            description=exercise.description,
            image_url=exercise.image_url,
            created_at=exercise.created_at,
            updated_at=exercise.updated_at,
        )
