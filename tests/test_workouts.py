import pytest
from beanie import PydanticObjectId

from gainsly.models.mongodb import WorkoutDocument, WorkoutSetDocument


async def create_workout(client, user, **fields):
    body = {"name": "Push Day", **fields}
    response = await client.post("/workouts", json=body, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def add_set(client, user, workout_id, exercise_id, reps=10, weight=60):
    response = await client.post(
        f"/workouts/{workout_id}/sets",
        json={"exerciseId": exercise_id, "reps": reps, "weight": weight},
        headers=user["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_workout_defaults(client, user):
    workout = await create_workout(client, user)

    assert workout["name"] == "Push Day"
    assert workout["userId"] == user["user"]["id"]
    assert workout["exercises"] == []
    assert workout["sets"] == []
    assert workout["isTemplate"] is False
    assert workout["completed"] is False
    assert workout["duration"] == 0
    assert workout["date"]


@pytest.mark.asyncio
async def test_create_workout_requires_name(client, user):
    response = await client.post("/workouts", json={"description": "no name"}, headers=user["headers"])

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["message"] == "name is required"


@pytest.mark.asyncio
async def test_create_workout_rejects_long_name(client, user):
    response = await client.post("/workouts", json={"name": "x" * 51}, headers=user["headers"])
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_workout_rejects_long_description(client, user):
    response = await client.post(
        "/workouts", json={"name": "Legs", "description": "x" * 501}, headers=user["headers"]
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_workout_with_unknown_exercise_is_not_found(client, user):
    response = await client.post(
        "/workouts",
        json={"name": "Legs", "exercises": ["65f1c0ffee0000000000beef"]},
        headers=user["headers"],
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_workout_populates_exercises(client, user, exercises):
    workout = await create_workout(client, user, exercises=[exercises["Bench Press"]])

    assert workout["exercises"][0]["name"] == "Bench Press"


@pytest.mark.asyncio
async def test_list_workouts_newest_first(client, user, other_user, exercises):
    await create_workout(client, user, name="Old", date="2024-01-01T08:00:00Z")
    await create_workout(
        client, user, name="New", date="2024-03-01T08:00:00Z", exercises=[exercises["Pull-ups"]]
    )
    await create_workout(client, other_user, name="Not mine")

    response = await client.get("/workouts", headers=user["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [w["name"] for w in body["data"]] == ["New", "Old"]
    assert body["data"][0]["exercises"][0]["name"] == "Pull-ups"


@pytest.mark.asyncio
async def test_get_workout_populates_sets(client, user, exercises):
    workout = await create_workout(client, user)
    await add_set(client, user, workout["id"], exercises["Bench Press"], reps=8, weight=80)

    response = await client.get(f"/workouts/{workout['id']}", headers=user["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["exercises"][0]["name"] == "Bench Press"
    assert data["sets"][0]["reps"] == 8
    assert data["sets"][0]["weight"] == 80
    assert data["sets"][0]["workoutId"] == workout["id"]


@pytest.mark.asyncio
async def test_get_unknown_workout_is_not_found(client, user):
    response = await client.get("/workouts/65f1c0ffee0000000000beef", headers=user["headers"])

    assert response.status_code == 404
    assert response.json()["message"] == "Workout not found"


@pytest.mark.asyncio
async def test_other_users_workout_is_unauthorized(client, user, other_user):
    workout = await create_workout(client, user)
    url = f"/workouts/{workout['id']}"

    assert (await client.get(url, headers=other_user["headers"])).status_code == 401
    assert (await client.put(url, json={"name": "Mine now"}, headers=other_user["headers"])).status_code == 401
    assert (await client.delete(url, headers=other_user["headers"])).status_code == 401

    still_there = await client.get(url, headers=user["headers"])
    assert still_there.json()["data"]["name"] == "Push Day"


@pytest.mark.asyncio
async def test_update_workout_is_partial(client, user, exercises):
    workout = await create_workout(client, user, description="Chest focus")

    response = await client.put(
        f"/workouts/{workout['id']}",
        json={"completed": True, "duration": 45, "exercises": [exercises["Bench Press"]]},
        headers=user["headers"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["completed"] is True
    assert data["duration"] == 45
    assert data["description"] == "Chest focus"
    assert data["exercises"][0]["name"] == "Bench Press"


@pytest.mark.asyncio
async def test_update_workout_rejects_unknown_exercise(client, user):
    workout = await create_workout(client, user)

    response = await client.put(
        f"/workouts/{workout['id']}",
        json={"exercises": ["65f1c0ffee0000000000beef"]},
        headers=user["headers"],
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_workout_cascades_to_sets(client, user, exercises):
    workout = await create_workout(client, user)
    await add_set(client, user, workout["id"], exercises["Bench Press"])
    await add_set(client, user, workout["id"], exercises["Pull-ups"])
    workout_id = PydanticObjectId(workout["id"])

    response = await client.delete(f"/workouts/{workout['id']}", headers=user["headers"])

    assert response.status_code == 200
    assert await WorkoutDocument.get(workout_id) is None
    assert await WorkoutSetDocument.find(WorkoutSetDocument.workout_id == workout_id).count() == 0


@pytest.mark.asyncio
async def test_same_exercise_twice_lists_exercise_once(client, user, exercises):
    workout = await create_workout(client, user)
    bench = exercises["Bench Press"]

    first = await add_set(client, user, workout["id"], bench, reps=10, weight=60)
    second = await add_set(client, user, workout["id"], bench, reps=8, weight=70)

    stored = await WorkoutDocument.get(PydanticObjectId(workout["id"]))
    assert [str(e) for e in stored.exercises] == [bench]
    assert [str(s) for s in stored.sets] == [first["id"], second["id"]]
    assert first["completed"] is False


@pytest.mark.asyncio
async def test_add_set_validates_reps_and_weight(client, user, exercises):
    workout = await create_workout(client, user)
    url = f"/workouts/{workout['id']}/sets"
    bench = exercises["Bench Press"]

    zero_reps = await client.post(url, json={"exerciseId": bench, "reps": 0, "weight": 10}, headers=user["headers"])
    negative = await client.post(url, json={"exerciseId": bench, "reps": 5, "weight": -1}, headers=user["headers"])
    missing = await client.post(url, json={"reps": 5, "weight": 10}, headers=user["headers"])

    assert zero_reps.status_code == 400
    assert negative.status_code == 400
    assert missing.status_code == 400
    assert missing.json()["message"] == "exerciseId is required"


@pytest.mark.asyncio
async def test_add_set_to_other_users_workout_is_unauthorized(client, user, other_user, exercises):
    workout = await create_workout(client, user)

    response = await client.post(
        f"/workouts/{workout['id']}/sets",
        json={"exerciseId": exercises["Bench Press"], "reps": 5, "weight": 20},
        headers=other_user["headers"],
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_set(client, user, exercises):
    workout = await create_workout(client, user)
    workout_set = await add_set(client, user, workout["id"], exercises["Bench Press"])

    response = await client.put(
        f"/workouts/sets/{workout_set['id']}",
        json={"reps": 12, "completed": True},
        headers=user["headers"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["reps"] == 12
    assert data["completed"] is True
    assert data["weight"] == workout_set["weight"]


@pytest.mark.asyncio
async def test_update_set_of_other_user_is_unauthorized(client, user, other_user, exercises):
    workout = await create_workout(client, user)
    workout_set = await add_set(client, user, workout["id"], exercises["Bench Press"])

    response = await client.put(
        f"/workouts/sets/{workout_set['id']}", json={"reps": 1}, headers=other_user["headers"]
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_unknown_set_is_not_found(client, user):
    response = await client.put(
        "/workouts/sets/65f1c0ffee0000000000beef", json={"reps": 1}, headers=user["headers"]
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Set not found"


@pytest.mark.asyncio
async def test_delete_set_removes_it_from_workout(client, user, exercises):
    workout = await create_workout(client, user)
    keep = await add_set(client, user, workout["id"], exercises["Bench Press"])
    drop = await add_set(client, user, workout["id"], exercises["Bench Press"])

    response = await client.delete(f"/workouts/sets/{drop['id']}", headers=user["headers"])

    assert response.status_code == 200
    stored = await WorkoutDocument.get(PydanticObjectId(workout["id"]))
    assert [str(s) for s in stored.sets] == [keep["id"]]
    assert await WorkoutSetDocument.get(PydanticObjectId(drop["id"])) is None


@pytest.mark.asyncio
async def test_delete_set_of_other_user_is_unauthorized(client, user, other_user, exercises):
    workout = await create_workout(client, user)
    workout_set = await add_set(client, user, workout["id"], exercises["Bench Press"])

    response = await client.delete(f"/workouts/sets/{workout_set['id']}", headers=other_user["headers"])

    assert response.status_code == 401
    assert await WorkoutSetDocument.get(PydanticObjectId(workout_set["id"])) is not None
