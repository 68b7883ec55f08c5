import pytest


@pytest.mark.asyncio
async def test_list_requires_auth(client, exercises):
    response = await client.get("/exercises")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_sorted_by_name_with_count(client, user, exercises):
    response = await client.get("/exercises", headers=user["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 3
    assert [e["name"] for e in body["data"]] == ["Barbell Squat", "Bench Press", "Pull-ups"]
    assert body["data"][0]["muscleGroup"] == "Legs"


@pytest.mark.asyncio
async def test_create_exercise(client, user):
    response = await client.post(
        "/exercises",
        json={"name": "Overhead Press", "muscleGroup": "Shoulders", "description": "Standing press"},
        headers=user["headers"],
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["id"]
    assert data["name"] == "Overhead Press"
    assert data["muscleGroup"] == "Shoulders"
    assert data["imageUrl"] == ""


@pytest.mark.asyncio
async def test_create_exercise_accepts_snake_case(client, user):
    response = await client.post(
        "/exercises",
        json={"name": "Dips", "muscle_group": "Chest", "image_url": "https://example.com/dips.jpg"},
        headers=user["headers"],
    )

    assert response.status_code == 201
    assert response.json()["data"]["imageUrl"] == "https://example.com/dips.jpg"


@pytest.mark.asyncio
async def test_create_exercise_requires_muscle_group(client, user):
    response = await client.post("/exercises", json={"name": "Mystery"}, headers=user["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "muscleGroup is required"


@pytest.mark.asyncio
async def test_create_exercise_rejects_blank_name(client, user):
    response = await client.post(
        "/exercises", json={"name": "   ", "muscleGroup": "Legs"}, headers=user["headers"]
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_exercise(client, user, exercises):
    exercise_id = exercises["Pull-ups"]

    response = await client.get(f"/exercises/{exercise_id}", headers=user["headers"])

    assert response.status_code == 200
    assert response.json()["data"]["id"] == exercise_id


@pytest.mark.asyncio
async def test_get_unknown_exercise_is_not_found(client, user, exercises):
    response = await client.get("/exercises/65f1c0ffee0000000000beef", headers=user["headers"])

    assert response.status_code == 404
    assert response.json()["message"] == "Exercise not found"


@pytest.mark.asyncio
async def test_get_malformed_id_is_not_found(client, user):
    response = await client.get("/exercises/not-an-id", headers=user["headers"])
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_exercise_is_partial(client, user, exercises):
    exercise_id = exercises["Bench Press"]

    response = await client.put(
        f"/exercises/{exercise_id}",
        json={"description": "Flat barbell bench"},
        headers=user["headers"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["description"] == "Flat barbell bench"
    assert data["name"] == "Bench Press"
    assert data["muscleGroup"] == "Chest"


@pytest.mark.asyncio
async def test_update_unknown_exercise_is_not_found(client, user):
    response = await client.put(
        "/exercises/65f1c0ffee0000000000beef", json={"name": "X"}, headers=user["headers"]
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_exercise(client, user, exercises):
    exercise_id = exercises["Pull-ups"]

    response = await client.delete(f"/exercises/{exercise_id}", headers=user["headers"])
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {}}

    missing = await client.get(f"/exercises/{exercise_id}", headers=user["headers"])
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_exercise_in_use_is_conflict(client, user, exercises):
    bench = exercises["Bench Press"]
    workout = (await client.post(
        "/workouts", json={"name": "Push Day"}, headers=user["headers"]
    )).json()["data"]
    await client.post(
        f"/workouts/{workout['id']}/sets",
        json={"exerciseId": bench, "reps": 5, "weight": 80},
        headers=user["headers"],
    )

    response = await client.delete(f"/exercises/{bench}", headers=user["headers"])
    assert response.status_code == 409
    assert response.json()["message"] == "Exercise is used in workouts and cannot be deleted"

    # Dropped from the workout's list, but the logged set still points at it
    await client.put(f"/workouts/{workout['id']}", json={"exercises": []}, headers=user["headers"])
    response = await client.delete(f"/exercises/{bench}", headers=user["headers"])
    assert response.status_code == 409

    fetched = await client.get(f"/workouts/{workout['id']}", headers=user["headers"])
    assert fetched.json()["data"]["sets"][0]["exerciseId"] == bench

    await client.delete(f"/workouts/{workout['id']}", headers=user["headers"])
    response = await client.delete(f"/exercises/{bench}", headers=user["headers"])
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_delete_unknown_exercise_is_not_found(client, user):
    response = await client.delete("/exercises/65f1c0ffee0000000000beef", headers=user["headers"])
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_search_is_public_and_case_insensitive(client, exercises):
    response = await client.get("/exercises/search", params={"query": "PRESS"})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["data"][0]["name"] == "Bench Press"


@pytest.mark.asyncio
async def test_search_matches_muscle_group(client, exercises):
    response = await client.get("/exercises/search", params={"query": "leg"})

    names = [e["name"] for e in response.json()["data"]]
    assert names == ["Barbell Squat"]


@pytest.mark.asyncio
async def test_search_treats_query_literally(client, exercises):
    response = await client.get("/exercises/search", params={"query": ".*("})

    assert response.status_code == 200
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_search_without_query_returns_everything(client, exercises):
    response = await client.get("/exercises/search")

    assert response.status_code == 200
    assert response.json()["count"] == 3


@pytest.mark.asyncio
async def test_search_with_blank_query_returns_everything(client, exercises):
    response = await client.get("/exercises/search", params={"query": "  "})
    assert response.json()["count"] == 3
