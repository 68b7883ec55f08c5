import pytest
from beanie import PydanticObjectId

from gainsly.models.mongodb import UserDocument, WorkoutDocument, WorkoutSetDocument
from gainsly.services import workouts as workout_service


@pytest.fixture
def make_template(client):
    """Create a template with one set per (exercise_id, reps, weight) tuple"""

    async def _make(user, name, sets=(), is_template=True):
        response = await client.post(
            "/workouts",
            json={"name": name, "description": f"{name} template", "isTemplate": is_template},
            headers=user["headers"],
        )
        assert response.status_code == 201, response.text
        template = response.json()["data"]
        for exercise_id, reps, weight in sets:
            added = await client.post(
                f"/workouts/{template['id']}/sets",
                json={"exerciseId": exercise_id, "reps": reps, "weight": weight},
                headers=user["headers"],
            )
            assert added.status_code == 201, added.text
        return template

    return _make


@pytest.mark.asyncio
async def test_list_templates_sorted_by_name(client, user, other_user, make_template):
    await make_template(user, "Upper")
    await make_template(user, "Full Body")
    await make_template(user, "Just a workout", is_template=False)
    await make_template(other_user, "Someone else's")

    response = await client.get("/workouts/templates", headers=user["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [t["name"] for t in body["data"]] == ["Full Body", "Upper"]
    assert all(t["isTemplate"] for t in body["data"])


@pytest.mark.asyncio
async def test_create_from_template_copies_sets(client, user, exercises, make_template):
    squat, bench = exercises["Barbell Squat"], exercises["Bench Press"]
    template = await make_template(
        user, "Full Body", sets=[(squat, 5, 100), (bench, 8, 70), (squat, 3, 110)]
    )
    template_id = PydanticObjectId(template["id"])
    original_sets = await WorkoutSetDocument.find(
        WorkoutSetDocument.workout_id == template_id
    ).to_list()

    response = await client.post(f"/workouts/templates/{template['id']}", headers=user["headers"])

    assert response.status_code == 201
    workout = response.json()["data"]
    assert workout["id"] != template["id"]
    assert workout["name"] == "Full Body"
    assert workout["description"] == "Full Body template"
    assert workout["isTemplate"] is False
    assert [e["id"] for e in workout["exercises"]] == [squat, bench]

    copied = workout["sets"]
    assert [(s["exerciseId"], s["reps"], s["weight"]) for s in copied] == [
        (squat, 5, 100),
        (bench, 8, 70),
        (squat, 3, 110),
    ]
    assert all(s["completed"] is False for s in copied)
    assert all(s["workoutId"] == workout["id"] for s in copied)
    assert not {s["id"] for s in copied} & {str(s.id) for s in original_sets}


@pytest.mark.asyncio
async def test_create_from_template_leaves_template_untouched(client, user, exercises, make_template):
    template = await make_template(user, "Upper", sets=[(exercises["Pull-ups"], 10, 0)])
    template_id = PydanticObjectId(template["id"])
    before = await WorkoutDocument.get(template_id)

    await client.post(f"/workouts/templates/{template['id']}", headers=user["headers"])
    await client.post(f"/workouts/templates/{template['id']}", headers=user["headers"])

    after = await WorkoutDocument.get(template_id)
    assert after.sets == before.sets
    assert after.exercises == before.exercises
    assert after.updated_at == before.updated_at
    assert after.is_template is True
    assert await WorkoutSetDocument.find(WorkoutSetDocument.workout_id == template_id).count() == 1


@pytest.mark.asyncio
async def test_create_from_non_template_is_bad_request(client, user, make_template):
    workout = await make_template(user, "Regular", is_template=False)

    response = await client.post(f"/workouts/templates/{workout['id']}", headers=user["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "This workout is not a template"


@pytest.mark.asyncio
async def test_create_from_other_users_template_is_unauthorized(client, user, other_user, make_template):
    template = await make_template(user, "Private")

    response = await client.post(f"/workouts/templates/{template['id']}", headers=other_user["headers"])
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_from_missing_template_is_not_found(client, user):
    response = await client.post(
        "/workouts/templates/65f1c0ffee0000000000beef", headers=user["headers"]
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Template not found"


@pytest.mark.asyncio
async def test_failed_copy_leaves_no_partial_workout(client, user, exercises, make_template, monkeypatch):
    squat = exercises["Barbell Squat"]
    template = await make_template(user, "Legs", sets=[(squat, 5, 100), (squat, 5, 105)])
    template_doc = await WorkoutDocument.get(PydanticObjectId(template["id"]))
    owner = await UserDocument.get(PydanticObjectId(user["user"]["id"]))

    original_insert = WorkoutSetDocument.insert
    inserted = []

    async def insert_then_fail(self, *args, **kwargs):
        inserted.append(self)
        if len(inserted) == 2:
            raise RuntimeError("write failed")
        return await original_insert(self, *args, **kwargs)

    monkeypatch.setattr(WorkoutSetDocument, "insert", insert_then_fail)

    with pytest.raises(RuntimeError):
        await workout_service.create_from_template(template_doc, owner)

    monkeypatch.undo()
    assert await WorkoutDocument.find(WorkoutDocument.user_id == owner.id).count() == 1
    assert await WorkoutSetDocument.find(
        WorkoutSetDocument.workout_id != template_doc.id
    ).count() == 0
