import pytest

from src.hr_dashboard.hr_dashboard.main import create_app


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, *, email="owner@example.com", remember_me=False):
    client.post("/api/register", json={"name": "Owner", "email": email, "password": "s3cret-pass"})
    return client.post("/api/login", json={"email": email, "password": "s3cret-pass", "remember_me": remember_me})


@pytest.fixture
def logged_in(client):
    resp = _login(client)
    assert resp.status_code == 200
    return client


def _add_employee(client, code="EMP001", salary=75000):
    resp = client.post(
        "/api/employees",
        json={"employee_code": code, "name": "John Smith", "joining_date": "2024-01-15", "basic_salary": salary},
    )
    assert resp.status_code == 201
    return resp.get_json()["data"]["employee_id"]


def test_salary_routes_require_login(client):
    resp = client.get("/api/salary")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Authentication required"}


def test_register_twice_conflicts(client):
    client.post("/api/register", json={"name": "Owner", "email": "owner@example.com", "password": "s3cret-pass"})
    resp = client.post("/api/register", json={"name": "Owner", "email": "owner@example.com", "password": "s3cret-pass"})

    assert resp.status_code == 409
    assert resp.get_json()["errors"] == {"email": "User with this email already exists"}


def test_bad_login_is_unauthorized(client):
    resp = client.post("/api/login", json={"email": "ghost@example.com", "password": "whatever1"})

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid email or password"


def test_remember_me_makes_session_persistent(client):
    remembered = _login(client, email="keep@example.com", remember_me=True)
    forgotten = _login(client, email="drop@example.com", remember_me=False)

    assert "Expires=" in remembered.headers["Set-Cookie"]
    assert "Expires=" not in forgotten.headers["Set-Cookie"]


def test_me_and_logout(logged_in):
    assert logged_in.get("/api/me").get_json()["data"]["email"] == "owner@example.com"

    logged_in.post("/api/logout")

    assert logged_in.get("/api/me").status_code == 401


def test_salary_create_duplicate_and_validation(logged_in):
    employee_id = _add_employee(logged_in)
    body = {"employee_id": employee_id, "month": 6, "year": 2024, "bonus": 2000, "deductions": 800}

    created = logged_in.post("/api/salary", json=body)
    duplicate = logged_in.post("/api/salary", json=body)
    invalid = logged_in.post("/api/salary", json={**body, "month": 13})

    assert created.status_code == 201
    data = created.get_json()["data"]
    assert data["total_salary"] == 76200
    assert data["status"] == "DRAFT"
    assert data["employee"]["employee_code"] == "EMP001"
    assert duplicate.status_code == 409
    assert duplicate.get_json()["error"] == "Salary record already exists for this month/year"
    assert invalid.status_code == 400
    assert "month" in invalid.get_json()["errors"]


def test_salary_update_approve_delete(logged_in):
    employee_id = _add_employee(logged_in)
    record_id = logged_in.post("/api/salary", json={"employee_id": employee_id, "month": 6, "year": 2024}).get_json()[
        "data"
    ]["record_id"]

    patched = logged_in.patch(f"/api/salary/{record_id}", json={"allowances": 1500, "notes": "housing"})
    approved = logged_in.post(f"/api/salary/{record_id}/approve")
    deleted = logged_in.delete(f"/api/salary/{record_id}")
    missing = logged_in.delete(f"/api/salary/{record_id}")

    assert patched.get_json()["data"]["total_salary"] == 76500
    assert patched.get_json()["data"]["notes"] == "housing"
    assert approved.get_json()["data"]["status"] == "APPROVED"
    assert approved.get_json()["data"]["processed_at"] == "2024-06-15T09:30:00"
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_other_accounts_records_are_not_found(app, logged_in):
    employee_id = _add_employee(logged_in)
    record_id = logged_in.post("/api/salary", json={"employee_id": employee_id, "month": 6, "year": 2024}).get_json()[
        "data"
    ]["record_id"]

    intruder = app.test_client()
    _login(intruder, email="intruder@example.com")

    assert intruder.post(f"/api/salary/{record_id}/approve").status_code == 404
    assert intruder.post("/api/salary", json={"employee_id": employee_id, "month": 7, "year": 2024}).status_code == 404
    assert intruder.get("/api/salary").get_json()["data"] == []


def test_generate_stats_and_csv_export(logged_in):
    _add_employee(logged_in, "EMP001", 75000)
    _add_employee(logged_in, "EMP002", 65000)

    first = logged_in.post("/api/salary/generate", json={"month": 6, "year": 2024})
    second = logged_in.post("/api/salary/generate", json={"month": 6, "year": 2024})
    stats = logged_in.get("/api/salary/stats?month=6&year=2024").get_json()["data"]
    export = logged_in.get("/api/salary/export.csv?month=6&year=2024")

    assert first.get_json()["data"]["new_records_count"] == 2
    assert second.get_json()["data"]["new_records_count"] == 0
    assert stats["total_records"] == 2
    assert stats["total_payroll"] == 140000
    assert export.mimetype == "text/csv"
    assert "salary_report_2024_6.csv" in export.headers["Content-Disposition"]
    lines = export.data.decode("utf-8-sig").strip().splitlines()
    assert lines[0].startswith("year,month,employee_code")
    assert len(lines) == 3


def test_generate_without_period_is_bad_request(logged_in):
    resp = logged_in.post("/api/salary/generate", json={})

    assert resp.status_code == 400


def test_employee_bad_date_is_bad_request(logged_in):
    resp = logged_in.post(
        "/api/employees",
        json={"employee_code": "EMP009", "name": "Jane Doe", "joining_date": "15/01/2024", "basic_salary": 50000},
    )

    assert resp.status_code == 400
    assert "joining_date" in resp.get_json()["errors"]


def test_project_and_task_routes(logged_in):
    project = logged_in.post("/api/projects", json={"title": "Website Redesign", "start_date": "2024-06-01"})
    project_id = project.get_json()["data"]["project_id"]
    task = logged_in.post("/api/tasks", json={"project_id": project_id, "title": "Build header", "priority": "HIGH"})
    task_id = task.get_json()["data"]["task_id"]

    moved = logged_in.post(f"/api/tasks/{task_id}/status", json={"status": "DONE"})
    detail = logged_in.get(f"/api/projects/{project_id}").get_json()["data"]
    stats = logged_in.get("/api/projects/stats").get_json()["data"]

    assert project.status_code == 201
    assert task.status_code == 201
    assert moved.get_json()["data"]["status"] == "DONE"
    assert [t["title"] for t in detail["tasks"]] == ["Build header"]
    assert stats["total_tasks"] == 1
    assert stats["pending_tasks"] == 0
