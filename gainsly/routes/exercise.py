# gainsly/routes/exercise.py
"""
Gainsly API - Exercise Routes.

Global exercise catalogue: CRUD plus a public search.
"""

from datetime import datetime, timezone
from typing import Optional
import logging
import re

from fastapi import APIRouter, Depends, Query, status

from gainsly.dependencies import get_current_user
from gainsly.models.mongodb import (
    ExerciseDocument,
    UserDocument,
    WorkoutDocument,
    WorkoutSetDocument,
)
from gainsly.schemas.exercise import ExerciseCreate, ExerciseOut, ExerciseUpdate
from gainsly.utils.errors import ConflictError, NotFoundError
from gainsly.utils.objectid import parse_object_id

logger = logging.getLogger(__name__)
router = APIRouter()


def _listing(exercises):
    data = [ExerciseOut.from_document(e).model_dump(by_alias=True) for e in exercises]
    return {"success": True, "count": len(data), "data": data}


async def _get_exercise(exercise_id: str) -> ExerciseDocument:
    exercise = await ExerciseDocument.get(parse_object_id(exercise_id, "Exercise"))
    if not exercise:
        raise NotFoundError("Exercise")
    return exercise


@router.get("/search")
async def search_exercises(query: Optional[str] = Query(default=None)):
    """
    Search exercises by name or muscle group.

    Matching is a case-insensitive substring match with the query taken
    literally. An empty query returns the whole catalogue.
    """
    term = (query or "").strip()
    if not term:
        exercises = await ExerciseDocument.find_all().sort("+name").to_list()
        return _listing(exercises)

    pattern = {"$regex": re.escape(term), "$options": "i"}
    exercises = await ExerciseDocument.find(
        {"$or": [{"name": pattern}, {"muscle_group": pattern}]}
    ).sort("+name").to_list()
    return _listing(exercises)


@router.get("")
async def list_exercises(user: UserDocument = Depends(get_current_user)):
    """Get all exercises sorted by name."""
    exercises = await ExerciseDocument.find_all().sort("+name").to_list()
    return _listing(exercises)


@router.get("/{exercise_id}")
async def get_exercise(exercise_id: str, user: UserDocument = Depends(get_current_user)):
    exercise = await _get_exercise(exercise_id)
    return {"success": True, "data": ExerciseOut.from_document(exercise).model_dump(by_alias=True)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_exercise(
    payload: ExerciseCreate,
    user: UserDocument = Depends(get_current_user)
):
    """Add an exercise to the catalogue."""
    exercise = ExerciseDocument(**payload.model_dump())
    await exercise.insert()
    logger.info(f"Exercise {exercise.id} created by user {user.id}")
    return {"success": True, "data": ExerciseOut.from_document(exercise).model_dump(by_alias=True)}


@router.put("/{exercise_id}")
async def update_exercise(
    exercise_id: str,
    payload: ExerciseUpdate,
    user: UserDocument = Depends(get_current_user)
):
    """Update the supplied fields of an exercise."""
    exercise = await _get_exercise(exercise_id)

    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(exercise, field, value)
    exercise.updated_at = datetime.now(timezone.utc)
    await exercise.save()

    return {"success": True, "data": ExerciseOut.from_document(exercise).model_dump(by_alias=True)}


@router.delete("/{exercise_id}")
async def delete_exercise(exercise_id: str, user: UserDocument = Depends(get_current_user)):
    """
    Remove an exercise from the catalogue.

    Refused with 409 while any workout or logged set still references it.
    """
    exercise = await _get_exercise(exercise_id)

    in_workouts = await WorkoutDocument.find({"exercises": exercise.id}).count()
    in_sets = await WorkoutSetDocument.find(WorkoutSetDocument.exercise_id == exercise.id).count()
    if in_workouts or in_sets:
        raise ConflictError("Exercise is used in workouts and cannot be deleted")

    await exercise.delete()
    logger.info(f"Exercise {exercise.id} deleted by user {user.id}")
    return {"success": True, "data": {}}
