"""Integration tests for the student, lesson and contract HTTP API.

Run with: pytest tests/test_student_api.py -v
"""

import uuid

import pytest
from django.contrib import admin
from rest_framework.test import APIClient

from tutoring.models import ContractRecord, LessonRecord, StudentRecord


def create_student(client: APIClient, **payload) -> dict:
    body = {"firstName": "Marie", "lastName": "Curie", **payload}
    response = client.post("/api/students", body, format="json")
    assert response.status_code == 201
    return response.json()


def create_contract(client: APIClient, student_id: str, **payload) -> dict:
    response = client.post(f"/api/students/{student_id}/contracts", payload, format="json")
    assert response.status_code == 201
    return response.json()


def add_lesson(client: APIClient, student_id: str, **payload) -> dict:
    response = client.post(f"/api/students/{student_id}/lessons", payload, format="json")
    assert response.status_code == 201
    return response.json()


@pytest.mark.django_db
class TestStudentEndpoints:
    """Tests for /api/students"""

    def test_create_and_get_student(self, api_client: APIClient):
        """A created student can be fetched by id."""
        created = create_student(api_client, email="marie@example.com", tags=["physics"])

        response = api_client.get(f"/api/students/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["firstName"] == "Marie"
        assert body["email"] == "marie@example.com"
        assert body["tags"] == ["physics"]
        assert body["lessons"] == []
        assert body["billingHistory"] == []

    def test_list_students_sorted_with_active_count(self, api_client: APIClient):
        """The list is sorted by name and includes billingActiveCount."""
        zed = create_student(api_client, firstName="Zed", lastName="Adams")
        create_student(api_client, firstName="Amy", lastName="Brown")
        create_contract(api_client, zed["id"], mode="package", totalLessons=5)

        response = api_client.get("/api/students")

        assert response.status_code == 200
        body = response.json()
        assert [s["firstName"] for s in body] == ["Zed", "Amy"]
        assert [s["billingActiveCount"] for s in body] == [1, 0]

    def test_patch_student(self, api_client: APIClient):
        """A partial update changes only the supplied fields."""
        created = create_student(api_client)

        response = api_client.patch(
            f"/api/students/{created['id']}", {"goals": "Oral exam"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["goals"] == "Oral exam"
        assert response.json()["lastName"] == "Curie"
        assert response.json()["updatedAt"] is not None

    def test_create_student_defaults(self, api_client: APIClient):
        """A student created without isActive or origin is inactive with the default origin."""
        created = create_student(api_client)

        assert created["isActive"] is False
        assert created["origin"] == "Privé"
        assert created["cefr"] == {}
        assert created["photo"] is None

    def test_patch_student_cefr_and_photo(self, api_client: APIClient):
        """CEFR levels use the document skill keys and are persisted."""
        created = create_student(api_client)

        response = api_client.patch(
            f"/api/students/{created['id']}",
            {"cefr": {"oral": "B1", "ecrit": "A2"}, "photo": "photos/marie.png"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["cefr"] == {"oral": "B1", "ecrit": "A2"}
        record = StudentRecord.objects.get()
        assert record.cefr == {"oral": "B1", "ecrit": "A2"}
        assert record.photo == "photos/marie.png"

    def test_patch_student_rejects_unknown_cefr_level(self, api_client: APIClient):
        """Levels outside A1 to C2 return 400."""
        created = create_student(api_client)

        response = api_client.patch(
            f"/api/students/{created['id']}", {"cefr": {"oral": "D1"}}, format="json"
        )

        assert response.status_code == 400
        assert "cefr" in response.json()

    def test_delete_student(self, api_client: APIClient):
        """Deleting returns 204 and removes the student."""
        created = create_student(api_client)

        response = api_client.delete(f"/api/students/{created['id']}")

        assert response.status_code == 204
        assert not StudentRecord.objects.exists()

    def test_get_student_not_found(self, api_client: APIClient):
        """Given student does not exist, returns 404."""
        response = api_client.get(f"/api/students/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "STUDENT_NOT_FOUND", "message": "Student not found"}
        }

    def test_get_student_invalid_id_format(self, api_client: APIClient):
        """Given invalid UUID, returns 400."""
        response = api_client.get("/api/students/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    def test_create_student_rejects_bad_progress(self, api_client: APIClient):
        """Field validation errors return 400."""
        response = api_client.post(
            "/api/students", {"firstName": "X", "progress": 250}, format="json"
        )

        assert response.status_code == 400
        assert "progress" in response.json()


@pytest.mark.django_db
class TestBillingFlow:
    """Lessons and contracts through the API."""

    def test_pack_with_free_lesson(self, api_client: APIClient):
        """Five lessons on a 4+1 pack: the last one is free and the pack completes."""
        student = create_student(api_client)
        contract = create_contract(
            api_client, student["id"], mode="package", totalLessons=4, freeLessons=1
        )
        assert contract["displayName"] == "Pack of 4 lessons (1)"
        assert contract["capacity"] == 5

        for day in range(1, 6):
            body = add_lesson(api_client, student["id"], createdAt=f"2025-01-0{day}T10:00:00Z")

        assert [lesson["isFree"] for lesson in body["lessons"]] == [True, False, False, False, False]
        assert {lesson["billingId"] for lesson in body["lessons"]} == {contract["id"]}
        (pack,) = body["billingHistory"]
        assert pack["consumedLessons"] == 5
        assert pack["paidConsumed"] == 4
        assert pack["freeConsumed"] == 1
        assert pack["completed"] is True
        assert pack["completedAt"] is not None
        assert pack["progressPercent"] == 100

    def test_delete_lesson_reopens_pack(self, api_client: APIClient):
        """Removing the free lesson of a full pack reopens it."""
        student = create_student(api_client)
        create_contract(api_client, student["id"], mode="package", totalLessons=1, freeLessons=1)
        add_lesson(api_client, student["id"], createdAt="2025-01-01T10:00:00Z")
        body = add_lesson(api_client, student["id"], createdAt="2025-01-02T10:00:00Z")
        newest = body["lessons"][0]

        response = api_client.delete(f"/api/students/{student['id']}/lessons/{newest['id']}")
        assert response.status_code == 204

        detail = api_client.get(f"/api/students/{student['id']}").json()
        (pack,) = detail["billingHistory"]
        assert pack["completed"] is False
        assert pack["completedAt"] is None
        assert pack["consumedLessons"] == 1

    def test_patch_lesson_detaches_contract(self, api_client: APIClient):
        """Setting billingId to null unbills the lesson."""
        student = create_student(api_client)
        create_contract(api_client, student["id"], mode="single")
        lesson = add_lesson(api_client, student["id"])["lessons"][0]

        response = api_client.patch(
            f"/api/students/{student['id']}/lessons/{lesson['id']}",
            {"billingId": None, "homework": "Read chapter 2"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["billingId"] is None
        assert response.json()["homework"] == "Read chapter 2"
        record = ContractRecord.objects.get()
        assert record.consumed_lessons == 0
        assert record.completed is False

    def test_patch_contract(self, api_client: APIClient):
        """Contract edits are saved and progress recomputed."""
        student = create_student(api_client)
        contract = create_contract(api_client, student["id"], mode="package", totalLessons=2)
        add_lesson(api_client, student["id"])
        add_lesson(api_client, student["id"])

        response = api_client.patch(
            f"/api/students/{student['id']}/contracts/{contract['id']}",
            {"totalLessons": 3, "paid": True, "pricePerLesson": "40.00", "currency": "EUR"},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["paid"] is True
        assert body["pricePerLesson"] == "40.00"
        assert body["completed"] is False
        assert body["consumedLessons"] == 2

    def test_delete_contract_keeps_lessons(self, api_client: APIClient):
        """Deleting a contract leaves its lessons in place."""
        student = create_student(api_client)
        contract = create_contract(api_client, student["id"], mode="single")
        add_lesson(api_client, student["id"])

        response = api_client.delete(f"/api/students/{student['id']}/contracts/{contract['id']}")

        assert response.status_code == 204
        assert ContractRecord.objects.count() == 0
        assert str(LessonRecord.objects.get().billing_id) == contract["id"]

    def test_lesson_on_unknown_contract(self, api_client: APIClient):
        """An explicit unknown billingId returns 404."""
        student = create_student(api_client)

        response = api_client.post(
            f"/api/students/{student['id']}/lessons", {"billingId": str(uuid.uuid4())}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CONTRACT_NOT_FOUND"

    def test_update_missing_lesson(self, api_client: APIClient):
        """Given lesson does not exist, returns 404."""
        student = create_student(api_client)

        response = api_client.patch(
            f"/api/students/{student['id']}/lessons/{uuid.uuid4()}", {"comment": "x"}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LESSON_NOT_FOUND"

    def test_contract_rejects_negative_free_lessons(self, api_client: APIClient):
        """Input validation rejects negative counts."""
        student = create_student(api_client)

        response = api_client.post(
            f"/api/students/{student['id']}/contracts",
            {"mode": "package", "totalLessons": 4, "freeLessons": -1},
            format="json",
        )

        assert response.status_code == 400
        assert "freeLessons" in response.json()


@pytest.mark.django_db
class TestJsonBackend:
    """The API works the same over the JSON document store."""

    def test_billing_flow_on_json_store(self, api_client: APIClient, settings, tmp_path):
        """Lessons and contracts persist to the JSON document."""
        settings.TUTORING_STORE_BACKEND = "json"
        settings.TUTORING_DATA_DIR = str(tmp_path)
        student = create_student(api_client)
        create_contract(api_client, student["id"], mode="single")
        add_lesson(api_client, student["id"])

        assert not StudentRecord.objects.exists()
        assert (tmp_path / "students.json").exists()
        assert list((tmp_path / "backups").glob("students-*.json"))
        detail = api_client.get(f"/api/students/{student['id']}").json()
        assert detail["billingHistory"][0]["completed"] is True


def test_admin_registers_persistence_models():
    """Student, lesson and contract records are editable in the admin."""
    for model in (StudentRecord, LessonRecord, ContractRecord):
        assert admin.site.is_registered(model)
