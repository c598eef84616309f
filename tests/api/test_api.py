from datetime import datetime

import pytest

from src.lesson_payroll.lesson_payroll.core.enums import LessonStatus, SalaryStatus


def _login_teacher(client, teacher_id):
    with client.session_transaction() as sess:
        sess["role"] = "teacher"
        sess["teacher_id"] = teacher_id
    return client


@pytest.fixture
def january(repos, make_lesson):
    repos.lessons.add(make_lesson(lesson_id=1, scheduled_at=datetime(2026, 1, 5, 18, 0)))
    repos.lessons.add(make_lesson(lesson_id=2, scheduled_at=datetime(2026, 1, 12, 18, 0), voice=False, text=False))
    repos.lessons.add(make_lesson(lesson_id=3, teacher_id=2, scheduled_at=datetime(2026, 1, 6, 18, 0)))


def test_requires_login(client):
    res = client.get("/api/teachers/1/obligation")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_admin_routes_reject_teachers(client):
    _login_teacher(client, 1)

    assert client.get("/api/settings/penalties").status_code == 403
    assert client.post("/api/salaries/generate", json={"teacher_id": 1, "month": "2026-01"}).status_code == 403


def test_teacher_obligation(admin_client, january):
    res = admin_client.get("/api/teachers/1/obligation?date_from=2026-01-01&date_to=2026-01-31")

    body = res.get_json()
    assert res.status_code == 200
    assert body["total"] == 4
    assert body["completed"] == 2
    assert [item["action"] for item in body["items"]] == ["absence", "feedbacks", "voice", "text"]
    assert body["items"][2]["ratio"] == 0.5


def test_teacher_can_only_read_own_obligation(client, january):
    _login_teacher(client, 1)

    assert client.get("/api/teachers/1/obligation").status_code == 200
    assert client.get("/api/teachers/2/obligation").status_code == 403


def test_obligation_bad_date(admin_client):
    assert admin_client.get("/api/teachers/1/obligation?date_from=01/01/2026").status_code == 400


def test_obligation_unknown_teacher(admin_client):
    res = admin_client.get("/api/teachers/999/obligation")

    assert res.status_code == 404
    assert "999" in res.get_json()["message"]


def test_penalty_settings_roundtrip(admin_client):
    assert admin_client.get("/api/settings/penalties").get_json()["penalty_voice_amd"] == 1000

    res = admin_client.put(
        "/api/settings/penalties",
        json={
            "penalty_absence_amd": 100,
            "penalty_feedback_amd": 200,
            "penalty_voice_amd": 300,
            "penalty_text_amd": 400,
        },
    )

    assert res.status_code == 200
    assert admin_client.get("/api/settings/penalties").get_json()["penalty_text_amd"] == 400


def test_penalty_settings_validation(admin_client):
    res = admin_client.put("/api/settings/penalties", json={"penalty_absence_amd": -5})

    assert res.status_code == 400


def test_generate_salary_flow(admin_client, january):
    res = admin_client.post("/api/salaries/generate", json={"teacher_id": 1, "month": "2026-01"})
    salary = res.get_json()["salary"]

    assert res.status_code == 200
    assert salary["month"] == "2026-01"
    assert salary["gross_amount"] == 10000
    assert salary["penalty_deductions"] == 2000
    assert salary["net_amount"] == 8000
    assert salary["status"] == "PENDING"

    salary_id = salary["salary_id"]
    assert admin_client.post(f"/api/salaries/{salary_id}/status", json={"status": "PAID"}).status_code == 400
    assert admin_client.post(f"/api/salaries/{salary_id}/status", json={"status": "PROCESSING"}).status_code == 200
    paid = admin_client.post(f"/api/salaries/{salary_id}/status", json={"status": "PAID"}).get_json()["salary"]
    assert paid["paid_at"] is not None

    again = admin_client.post("/api/salaries/generate", json={"teacher_id": 1, "month": "2026-01"})
    assert again.status_code == 409
    assert admin_client.get(f"/api/salaries/{salary_id}").get_json() == paid


def test_generate_salary_bad_input(admin_client):
    assert admin_client.post("/api/salaries/generate", json={"teacher_id": 1, "month": "2026/01"}).status_code == 400
    assert admin_client.post("/api/salaries/generate", json={"month": "2026-01"}).status_code == 400
    assert admin_client.post("/api/salaries/generate", json={"teacher_id": 9, "month": "2026-01"}).status_code == 404


def test_generate_all_and_list(admin_client, january):
    res = admin_client.post("/api/salaries/generate-all", json={"year": 2026, "month": 1})

    assert res.status_code == 200
    assert res.get_json()["generated"] == 2

    listing = admin_client.get("/api/salaries?teacher_id=2").get_json()
    assert listing["total"] == 1
    assert listing["items"][0]["teacher_id"] == 2

    assert admin_client.get("/api/salaries?status=PENDING").get_json()["total"] == 2
    assert admin_client.get("/api/salaries?status=void").status_code == 400


def test_salary_status_unknown_record(admin_client):
    assert admin_client.post("/api/salaries/77/status", json={"status": "PROCESSING"}).status_code == 404
    assert admin_client.get("/api/salaries/77").status_code == 404


def test_breakdown_and_summary_for_own_teacher(client, january):
    _login_teacher(client, 1)

    breakdown = client.get("/api/salaries/breakdown/1/2026-01")
    assert breakdown.status_code == 200
    assert [row["total"] for row in breakdown.get_json()["lessons"]] == [5000, 3000]

    summary = client.get("/api/teachers/1/salary-summary").get_json()
    assert summary["total"] == {"count": 0, "amount": 0}

    assert client.get("/api/salaries/breakdown/2/2026-01").status_code == 403


def test_mark_action(client, repos, january):
    _login_teacher(client, 1)

    res = client.post("/api/lessons/2/actions/voice")

    assert res.status_code == 200
    assert res.get_json()["obligation"]["completed_actions_count"] == 3
    assert repos.lessons.get_by_id(2).voice_sent is True

    assert client.post("/api/lessons/2/actions/homework").status_code == 400
    assert client.post("/api/lessons/3/actions/voice").status_code == 403
    assert client.post("/api/lessons/99/actions/voice").status_code == 404


def test_lesson_obligation(admin_client, january):
    body = admin_client.get("/api/lessons/2/obligation").get_json()

    assert body["completed_actions_count"] == 2
    assert body["text_done"] is False


def test_exclude_from_salary(admin_client, repos, january):
    res = admin_client.post("/api/lessons/exclude-from-salary", json={"lesson_ids": [2]})

    assert res.status_code == 200
    assert res.get_json()["count"] == 1
    assert repos.lessons.get_by_id(2).status == LessonStatus.CANCELLED

    assert admin_client.post("/api/lessons/exclude-from-salary", json={"lesson_ids": []}).status_code == 400
    assert admin_client.post("/api/lessons/exclude-from-salary", json={"lesson_ids": [2]}).status_code == 404


def test_add_deduction(admin_client, repos, january):
    res = admin_client.post(
        "/api/deductions",
        json={"teacher_id": 1, "amount": 1500, "reason": "MISSING_FEEDBACK", "lesson_id": 1},
    )

    assert res.status_code == 201
    assert repos.deductions.items[0].amount == 1500

    assert admin_client.post("/api/deductions", json={"teacher_id": 1, "amount": 0}).status_code == 400
    assert (
        admin_client.post("/api/deductions", json={"teacher_id": 1, "amount": 10, "reason": "nope"}).status_code
        == 400
    )


def test_container_is_exposed_on_app(app, container):
    assert app.extensions["lesson_payroll"] is container
    assert container.salary_service.list_salary_records(status=SalaryStatus.PAID) == []


def test_teacher_can_only_read_own_lesson_obligation(client, january):
    _login_teacher(client, 1)

    assert client.get("/api/lessons/1/obligation").status_code == 200
    assert client.get("/api/lessons/3/obligation").status_code == 403
    assert client.get("/api/lessons/99/obligation").status_code == 404


def test_boolean_ids_are_rejected(admin_client, repos):
    res = admin_client.post("/api/salaries/generate", json={"teacher_id": True, "month": "2026-01"})

    assert res.status_code == 400
    assert repos.salaries.by_id == {}
    bad_lesson = admin_client.post("/api/deductions", json={"teacher_id": 1, "amount": 10, "lesson_id": True})
    assert bad_lesson.status_code == 400
    assert repos.deductions.items == []
