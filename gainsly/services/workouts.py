"""
Gainsly API - Workout Service.

Ownership checks, population of exercise/set references, set bookkeeping
and template instantiation for workouts.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from beanie import PydanticObjectId
from beanie.operators import In

from gainsly.models.mongodb import (
    ExerciseDocument,
    UserDocument,
    WorkoutDocument,
    WorkoutSetDocument,
)
from gainsly.schemas.exercise import ExerciseOut
from gainsly.schemas.workout import SetCreate, SetUpdate, WorkoutOut, WorkoutSetOut
from gainsly.utils.errors import AuthenticationError, NotFoundError, ValidationError
from gainsly.utils.objectid import parse_object_id

logger = logging.getLogger(__name__)


def _unique(ids: Iterable[PydanticObjectId]) -> List[PydanticObjectId]:
    seen = set()
    ordered = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def _ensure_owner(workout: WorkoutDocument, user: UserDocument, action: str) -> None:
    if workout.user_id != user.id:
        raise AuthenticationError(f"You are not authorized to {action}")


async def get_owned_workout(
    workout_id: str,
    user: UserDocument,
    action: str = "access this workout",
    resource: str = "Workout",
) -> WorkoutDocument:
    """
    Load a workout and check that ``user`` owns it.

    Raises:
        NotFoundError: If the workout does not exist.
        AuthenticationError: If it belongs to someone else.
    """
    workout = await WorkoutDocument.get(parse_object_id(workout_id, resource))
    if not workout:
        raise NotFoundError(resource)
    _ensure_owner(workout, user, action)
    return workout


async def ensure_exercises_exist(exercise_ids: Iterable[PydanticObjectId]) -> None:
    """
    Check that every id names an exercise.

    Raises:
        NotFoundError: If any id is unknown.
    """
    wanted = _unique(exercise_ids)
    if not wanted:
        return
    found = await ExerciseDocument.find(In(ExerciseDocument.id, wanted)).count()
    if found != len(wanted):
        raise NotFoundError("Exercise")


async def _exercise_map(ids: Iterable[PydanticObjectId]) -> Dict[PydanticObjectId, ExerciseOut]:
    wanted = _unique(ids)
    if not wanted:
        return {}
    exercises = await ExerciseDocument.find(In(ExerciseDocument.id, wanted)).to_list()
    return {exercise.id: ExerciseOut.from_document(exercise) for exercise in exercises}


async def _set_map(ids: Iterable[PydanticObjectId]) -> Dict[PydanticObjectId, WorkoutSetDocument]:
    wanted = _unique(ids)
    if not wanted:
        return {}
    sets = await WorkoutSetDocument.find(In(WorkoutSetDocument.id, wanted)).to_list()
    return {workout_set.id: workout_set for workout_set in sets}


async def populate_workout(workout: WorkoutDocument, include_sets: bool = True) -> WorkoutOut:
    """Serialize a workout with its exercises (and sets) resolved, in stored order."""
    exercises = await _exercise_map(workout.exercises)
    populated_sets: Optional[List[WorkoutSetOut]] = None
    if include_sets:
        sets = await _set_map(workout.sets)
        populated_sets = [
            WorkoutSetOut.from_document(sets[set_id]) for set_id in workout.sets if set_id in sets
        ]
    return WorkoutOut.from_document(
        workout,
        exercises=[exercises[e] for e in workout.exercises if e in exercises],
        sets=populated_sets,
    )


async def populate_workouts(workouts: List[WorkoutDocument]) -> List[WorkoutOut]:
    """Serialize many workouts with exercises populated using a single lookup."""
    exercises = await _exercise_map(e for w in workouts for e in w.exercises)
    return [
        WorkoutOut.from_document(
            workout,
            exercises=[exercises[e] for e in workout.exercises if e in exercises],
        )
        for workout in workouts
    ]


async def delete_workout(workout: WorkoutDocument) -> None:
    """Delete a workout together with every set it owns."""
    await WorkoutSetDocument.find(
        WorkoutSetDocument.workout_id == workout.id
    ).delete()
    if workout.sets:
        await WorkoutSetDocument.find(In(WorkoutSetDocument.id, workout.sets)).delete()
    await workout.delete()
    logger.info(f"Deleted workout {workout.id} and its sets")


async def add_set(workout: WorkoutDocument, data: SetCreate) -> WorkoutSetDocument:
    """
    Log a new set on ``workout``.

    The set id is always appended; the exercise id is appended only the
    first time the exercise appears in the workout.
    """
    await ensure_exercises_exist([data.exercise_id])

    workout_set = WorkoutSetDocument(
        workout_id=workout.id,
        exercise_id=data.exercise_id,
        reps=data.reps,
        weight=data.weight,
        completed=False,
    )
    await workout_set.insert()

    workout.sets.append(workout_set.id)
    if data.exercise_id not in workout.exercises:
        workout.exercises.append(data.exercise_id)
    workout.updated_at = datetime.now(timezone.utc)
    await workout.save()

    return workout_set


async def get_owned_set(
    set_id: str,
    user: UserDocument,
    action: str,
) -> Tuple[WorkoutSetDocument, WorkoutDocument]:
    """
    Load a set and the workout that owns it via the ``workout_id`` back-reference.

    Raises:
        NotFoundError: If the set or its workout is missing.
        AuthenticationError: If the workout belongs to someone else.
    """
    workout_set = await WorkoutSetDocument.get(parse_object_id(set_id, "Set"))
    if not workout_set:
        raise NotFoundError("Set")

    workout = await WorkoutDocument.get(workout_set.workout_id)
    if not workout or workout_set.id not in workout.sets:
        raise NotFoundError("Workout containing this set")

    _ensure_owner(workout, user, action)
    return workout_set, workout


async def update_set(workout_set: WorkoutSetDocument, data: SetUpdate) -> WorkoutSetDocument:
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(workout_set, field, value)
    workout_set.updated_at = datetime.now(timezone.utc)
    await workout_set.save()
    return workout_set


async def delete_set(workout_set: WorkoutSetDocument, workout: WorkoutDocument) -> None:
    workout.sets = [set_id for set_id in workout.sets if set_id != workout_set.id]
    workout.updated_at = datetime.now(timezone.utc)
    await workout.save()
    await workout_set.delete()


async def create_from_template(template: WorkoutDocument, user: UserDocument) -> WorkoutDocument:
    """
    Instantiate a template as a new, non-template workout dated now.

    Every template set is copied into a fresh WorkoutSet (exercise, reps and
    weight preserved, ``completed`` reset); the exercise list is copied into
    a new list. The template itself is never written. If copying fails
    part way, the new workout and the sets copied so far are removed.

    Raises:
        ValidationError: If ``template`` is not a template.
    """
    if not template.is_template:
        raise ValidationError("This workout is not a template")

    workout = WorkoutDocument(
        user_id=user.id,
        name=template.name,
        description=template.description,
        exercises=list(template.exercises),
        sets=[],
        is_template=False,
        date=datetime.now(timezone.utc),
    )
    await workout.insert()

    originals = await _set_map(template.sets)
    try:
        for set_id in template.sets:
            original = originals.get(set_id)
            if original is None:
                continue
            copy = WorkoutSetDocument(
                workout_id=workout.id,
                exercise_id=original.exercise_id,
                reps=original.reps,
                weight=original.weight,
                completed=False,
            )
            await copy.insert()
            workout.sets.append(copy.id)
        await workout.save()
    except Exception:
        logger.error(f"Copying template {template.id} failed, removing workout {workout.id}")
        await delete_workout(workout)
        raise

    logger.info(
        f"Created workout {workout.id} from template {template.id} "
        f"with {len(workout.sets)} sets"
    )
    return workout
