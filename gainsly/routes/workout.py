# gainsly/routes/workout.py
"""
Gainsly API - Workout Routes.

Workouts, their sets, and workout templates. Every route is scoped to the
signed-in user; touching another user's workout responds 401.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from gainsly.dependencies import get_current_user
from gainsly.models.mongodb import UserDocument, WorkoutDocument
from gainsly.schemas.workout import (
    SetCreate,
    SetUpdate,
    WorkoutCreate,
    WorkoutSetOut,
    WorkoutUpdate,
)
from gainsly.services import workouts as workout_service

router = APIRouter()


def _data(model):
    return {"success": True, "data": model.model_dump(by_alias=True)}


def _listing(models):
    data = [m.model_dump(by_alias=True) for m in models]
    return {"success": True, "count": len(data), "data": data}


@router.get("")
async def list_workouts(user: UserDocument = Depends(get_current_user)):
    """Get the user's workouts, newest first, with exercises populated."""
    workouts = await WorkoutDocument.find(
        WorkoutDocument.user_id == user.id
    ).sort("-date").to_list()
    return _listing(await workout_service.populate_workouts(workouts))


@router.get("/templates")
async def list_templates(user: UserDocument = Depends(get_current_user)):
    """Get the user's workout templates sorted by name."""
    templates = await WorkoutDocument.find(
        WorkoutDocument.user_id == user.id,
        WorkoutDocument.is_template == True,  # noqa: E712
    ).sort("+name").to_list()
    return _listing(await workout_service.populate_workouts(templates))


@router.post("/templates/{template_id}", status_code=status.HTTP_201_CREATED)
async def create_from_template(
    template_id: str,
    user: UserDocument = Depends(get_current_user)
):
    """Start a new workout from a template. The template is left untouched."""
    template = await workout_service.get_owned_workout(
        template_id, user, action="use this template", resource="Template"
    )
    workout = await workout_service.create_from_template(template, user)
    return _data(await workout_service.populate_workout(workout))


@router.put("/sets/{set_id}")
async def update_set(
    set_id: str,
    payload: SetUpdate,
    user: UserDocument = Depends(get_current_user)
):
    workout_set, _ = await workout_service.get_owned_set(set_id, user, "update this set")
    workout_set = await workout_service.update_set(workout_set, payload)
    return _data(WorkoutSetOut.from_document(workout_set))


@router.delete("/sets/{set_id}")
async def delete_set(set_id: str, user: UserDocument = Depends(get_current_user)):
    workout_set, workout = await workout_service.get_owned_set(set_id, user, "delete this set")
    await workout_service.delete_set(workout_set, workout)
    return {"success": True, "data": {}}


@router.get("/{workout_id}")
async def get_workout(workout_id: str, user: UserDocument = Depends(get_current_user)):
    """Get one workout with exercises and sets populated."""
    workout = await workout_service.get_owned_workout(workout_id, user)
    return _data(await workout_service.populate_workout(workout))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_workout(
    payload: WorkoutCreate,
    user: UserDocument = Depends(get_current_user)
):
    """Create a workout (or a template when ``isTemplate`` is set)."""
    await workout_service.ensure_exercises_exist(payload.exercises)

    workout = WorkoutDocument(
        user_id=user.id,
        name=payload.name,
        description=payload.description,
        exercises=list(payload.exercises),
        sets=[],
        is_template=payload.is_template,
        duration=payload.duration,
    )
    if payload.date is not None:
        workout.date = payload.date
    await workout.insert()

    return _data(await workout_service.populate_workout(workout))


@router.put("/{workout_id}")
async def update_workout(
    workout_id: str,
    payload: WorkoutUpdate,
    user: UserDocument = Depends(get_current_user)
):
    """Update the supplied fields of a workout."""
    workout = await workout_service.get_owned_workout(
        workout_id, user, action="update this workout"
    )

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "exercises" in changes:
        await workout_service.ensure_exercises_exist(payload.exercises)
        changes["exercises"] = list(payload.exercises)

    for field, value in changes.items():
        setattr(workout, field, value)
    workout.updated_at = datetime.now(timezone.utc)
    await workout.save()

    return _data(await workout_service.populate_workout(workout))


@router.delete("/{workout_id}")
async def delete_workout(workout_id: str, user: UserDocument = Depends(get_current_user)):
    """Delete a workout and all of its sets."""
    workout = await workout_service.get_owned_workout(
        workout_id, user, action="delete this workout"
    )
    await workout_service.delete_workout(workout)
    return {"success": True, "data": {}}


@router.post("/{workout_id}/sets", status_code=status.HTTP_201_CREATED)
async def add_set(
    workout_id: str,
    payload: SetCreate,
    user: UserDocument = Depends(get_current_user)
):
    """Log a set on a workout."""
    workout = await workout_service.get_owned_workout(
        workout_id, user, action="update this workout"
    )
    workout_set = await workout_service.add_set(workout, payload)
    return _data(WorkoutSetOut.from_document(workout_set))
