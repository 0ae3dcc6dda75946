"""Tests for department API endpoints."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from src.database.database import get_db
from src.main import app
from src.models.department import Department


# =============================================================================
# Helpers
# =============================================================================

def create_department(client, name, parent_id=None):
    payload = {"name": name}
    if parent_id is not None:
        payload["parent_id"] = parent_id
    response = client.post("/api/departments", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_employee(client, department_id, full_name, position="Engineer", hired_at=None):
    payload = {"full_name": full_name, "position": position}
    if hired_at:
        payload["hired_at"] = hired_at
    response = client.post(f"/api/departments/{department_id}/employees", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def error_code(response):
    return response.json()["error"]["code"]


# =============================================================================
# Create Endpoint Tests
# =============================================================================

class TestCreateDepartmentEndpoint:
    """Test cases for POST /api/departments."""

    def test_create_root(self, client):
        response = client.post("/api/departments", json={"name": "Company"})

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Company"
        assert data["parent_id"] is None
        assert "id" in data
        assert "created_at" in data

    def test_duplicate_sibling_returns_conflict(self, client):
        company = create_department(client, "Company")
        create_department(client, "IT", company["id"])
        create_department(client, "HR", company["id"])

        response = client.post(
            "/api/departments", json={"name": "IT", "parent_id": company["id"]}
        )

        assert response.status_code == 409
        assert error_code(response) == "duplicate"

    def test_missing_parent_returns_not_found(self, client):
        response = client.post("/api/departments", json={"name": "IT", "parent_id": 42})

        assert response.status_code == 404
        assert error_code(response) == "not_found"

    @pytest.mark.parametrize("payload", [{}, {"name": ""}, {"name": "   "}, {"name": "x" * 201}])
    def test_invalid_payload_returns_validation_error(self, client, payload):
        response = client.post("/api/departments", json=payload)

        assert response.status_code == 400
        assert error_code(response) == "validation_error"
        assert response.json()["error"]["field_errors"]

    def test_name_is_trimmed(self, client):
        data = create_department(client, "  Legal  ")

        assert data["name"] == "Legal"

    def test_length_limit_applies_after_trimming(self, client):
        data = create_department(client, "   " + "d" * 200 + "   ")

        assert data["name"] == "d" * 200

    def test_response_carries_request_id(self, client):
        response = client.post(
            "/api/departments",
            json={"name": "Company"},
            headers={"X-Request-ID": "abc-123"},
        )

        assert response.headers["X-Request-ID"] == "abc-123"


# =============================================================================
# Get Endpoint Tests
# =============================================================================

class TestGetDepartmentEndpoint:
    """Test cases for GET /api/departments/{id}."""

    def test_get_missing_returns_not_found(self, client):
        response = client.get("/api/departments/999")

        assert response.status_code == 404

    def test_depth_two_tree_with_employees(self, client):
        company = create_department(client, "Company")
        it = create_department(client, "IT", company["id"])
        backend = create_department(client, "Backend", it["id"])
        platform = create_department(client, "Platform", backend["id"])
        create_employee(client, company["id"], "CEO Person", "CEO")
        create_employee(client, backend["id"], "Backend Dev", hired_at="2023-05-01")
        create_employee(client, platform["id"], "Platform Dev")

        response = client.get(
            f"/api/departments/{company['id']}",
            params={"depth": 2, "include_employees": "true"},
        )

        assert response.status_code == 200
        data = response.json()
        assert [e["full_name"] for e in data["employees"]] == ["CEO Person"]

        it_node = data["children"][0]
        assert it_node["name"] == "IT"
        assert it_node["employees"] == []

        backend_node = it_node["children"][0]
        assert backend_node["name"] == "Backend"
        assert backend_node["employees"][0]["hired_at"] == "2023-05-01"
        assert backend_node["children"] == []

    def test_employees_omitted_when_not_requested(self, client):
        company = create_department(client, "Company")
        create_employee(client, company["id"], "Someone")

        response = client.get(
            f"/api/departments/{company['id']}",
            params={"include_employees": "false"},
        )

        assert response.status_code == 200
        assert response.json()["employees"] is None

    def test_out_of_range_depth_is_clamped(self, client):
        company = create_department(client, "Company")
        create_department(client, "IT", company["id"])

        response = client.get(f"/api/departments/{company['id']}", params={"depth": 50})

        assert response.status_code == 200
        assert len(response.json()["children"]) == 1


# =============================================================================
# Update Endpoint Tests
# =============================================================================

class TestUpdateDepartmentEndpoint:
    """Test cases for PATCH /api/departments/{id}."""

    def test_rename(self, client):
        company = create_department(client, "Company")

        response = client.patch(f"/api/departments/{company['id']}", json={"name": "Holding"})

        assert response.status_code == 200
        assert response.json()["name"] == "Holding"

    def test_move(self, client):
        a = create_department(client, "A")
        b = create_department(client, "B")

        response = client.patch(f"/api/departments/{b['id']}", json={"parent_id": a["id"]})

        assert response.status_code == 200
        assert response.json()["parent_id"] == a["id"]

    def test_empty_body_is_rejected(self, client):
        a = create_department(client, "A")

        response = client.patch(f"/api/departments/{a['id']}", json={})

        assert response.status_code == 400
        assert error_code(response) == "validation_error"

    def test_self_reference(self, client):
        a = create_department(client, "A")

        response = client.patch(f"/api/departments/{a['id']}", json={"parent_id": a["id"]})

        assert response.status_code == 400
        assert error_code(response) == "self_reference"

    def test_cyclic_reference_leaves_tree_unchanged(self, client):
        a = create_department(client, "A")
        b = create_department(client, "B", a["id"])
        c = create_department(client, "C", b["id"])

        response = client.patch(f"/api/departments/{a['id']}", json={"parent_id": c["id"]})

        assert response.status_code == 409
        assert error_code(response) == "cyclic_reference"

        tree = client.get(f"/api/departments/{a['id']}", params={"depth": 5}).json()
        assert tree["parent_id"] is None
        assert tree["children"][0]["children"][0]["id"] == c["id"]

    def test_failed_combined_update_does_not_rename(self, client):
        north = create_department(client, "North")
        south = create_department(client, "South")
        create_department(client, "Support", north["id"])
        sales = create_department(client, "Sales", south["id"])

        response = client.patch(
            f"/api/departments/{sales['id']}",
            json={"name": "Support", "parent_id": north["id"]},
        )

        assert response.status_code == 409
        tree = client.get(f"/api/departments/{south['id']}").json()
        assert [child["name"] for child in tree["children"]] == ["Sales"]

    def test_missing_department(self, client):
        response = client.patch("/api/departments/999", json={"name": "X"})

        assert response.status_code == 404


# =============================================================================
# Delete Endpoint Tests
# =============================================================================

class TestDeleteDepartmentEndpoint:
    """Test cases for DELETE /api/departments/{id}."""

    def test_cascade(self, client):
        company = create_department(client, "Company")
        it = create_department(client, "IT", company["id"])
        employee = create_employee(client, it["id"], "Dev")

        response = client.delete(f"/api/departments/{company['id']}", params={"mode": "cascade"})

        assert response.status_code == 204
        assert client.get(f"/api/departments/{company['id']}").status_code == 404
        assert client.get(f"/api/departments/{it['id']}").status_code == 404
        assert client.get(f"/api/employees/{employee['id']}").status_code == 404

    def test_reassign(self, client):
        a = create_department(client, "A")
        m1 = create_employee(client, a["id"], "Member One")
        b = create_department(client, "B")

        response = client.delete(
            f"/api/departments/{a['id']}",
            params={"mode": "reassign", "reassign_to_department_id": b["id"]},
        )

        assert response.status_code == 204
        assert client.get(f"/api/employees/{m1['id']}").json()["department_id"] == b["id"]
        missing = client.get(f"/api/departments/{a['id']}")
        assert missing.status_code == 404
        assert error_code(missing) == "not_found"

    @pytest.mark.parametrize(
        "params, status_code, code",
        [
            ({}, 400, "invalid_mode"),
            ({"mode": "archive"}, 400, "invalid_mode"),
            ({"mode": "reassign"}, 400, "target_required"),
            ({"mode": "reassign", "reassign_to_department_id": 999}, 404, "target_not_found"),
        ],
    )
    def test_delete_errors(self, client, params, status_code, code):
        a = create_department(client, "A")

        response = client.delete(f"/api/departments/{a['id']}", params=params)

        assert response.status_code == status_code
        assert error_code(response) == code
        assert client.get(f"/api/departments/{a['id']}").status_code == 200

    def test_reassign_to_self(self, client):
        a = create_department(client, "A")

        response = client.delete(
            f"/api/departments/{a['id']}",
            params={"mode": "reassign", "reassign_to_department_id": a["id"]},
        )

        assert response.status_code == 400
        assert error_code(response) == "cannot_reassign_to_self"

    def test_delete_missing(self, client):
        response = client.delete("/api/departments/999", params={"mode": "cascade"})

        assert response.status_code == 404


# =============================================================================
# Department Employees Endpoint Tests
# =============================================================================

class TestDepartmentEmployeesEndpoint:
    """Test cases for /api/departments/{id}/employees."""

    def test_create_employee_in_missing_department(self, client):
        response = client.post(
            "/api/departments/999/employees",
            json={"full_name": "Ada", "position": "Engineer"},
        )

        assert response.status_code == 404

    def test_invalid_hired_at(self, client):
        a = create_department(client, "A")

        response = client.post(
            f"/api/departments/{a['id']}/employees",
            json={"full_name": "Ada", "position": "Engineer", "hired_at": "not-a-date"},
        )

        assert response.status_code == 400

    def test_list_employees(self, client):
        a = create_department(client, "A")
        create_employee(client, a["id"], "First")
        create_employee(client, a["id"], "Second")

        response = client.get(f"/api/departments/{a['id']}/employees")

        assert response.status_code == 200
        assert [e["full_name"] for e in response.json()] == ["First", "Second"]


class TestHealth:
    """Health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# =============================================================================
# Transaction Tests
# =============================================================================

class TestCommitFailure:
    """A failed commit must be reported instead of a success status."""

    @pytest.fixture
    def failing_client(self, session_factory):
        def commit_fails_get_db():
            session = session_factory()
            try:
                yield session
                session.rollback()
                raise OperationalError(
                    "COMMIT", {}, Exception("could not serialize access")
                )
            finally:
                session.close()

        app.dependency_overrides[get_db] = commit_fails_get_db
        try:
            yield TestClient(app, raise_server_exceptions=False)
        finally:
            app.dependency_overrides.clear()

    @pytest.mark.parametrize(
        "method, path, kwargs",
        [
            ("post", "/api/departments", {"json": {"name": "Company"}}),
            ("delete", "/api/departments/1", {"params": {"mode": "cascade"}}),
        ],
    )
    def test_commit_failure_returns_server_error(
        self, session_factory, failing_client, method, path, kwargs
    ):
        with session_factory() as session:
            session.add(Department(name="Existing"))
            session.commit()

        response = getattr(failing_client, method)(path, **kwargs)

        assert response.status_code == 500
        assert error_code(response) == "internal_error"
        with session_factory() as session:
            names = session.execute(select(Department.name)).scalars().all()
        assert names == ["Existing"]
