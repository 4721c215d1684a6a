"""
Test suite for the /jobs endpoints.

Tests cover:
- Job creation (admin only, body validation)
- Job listing and filters
- Job retrieval
- Partial updates and deletion
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from app.core.database import get_db
from app.crud import job as job_crud
from app.schemas.job import JobCreateRequest
from main import app


class TestJobCreation:
    """Tests for POST /jobs"""

    def test_fails_for_users(self, client, sample_job_data, user_headers):
        """Test regular users cannot create jobs"""
        response = client.post("/jobs", json=sample_job_data, headers=user_headers)
        assert response.status_code == 401

    def test_fails_for_anon(self, client, sample_job_data):
        """Test anonymous callers cannot create jobs"""
        response = client.post("/jobs", json=sample_job_data)
        assert response.status_code == 401
        assert response.json()["error"]["status"] == 401

    def test_works_for_admins(self, client, sample_job_data, admin_headers):
        """Test admin can create a job"""
        response = client.post("/jobs", json=sample_job_data, headers=admin_headers)

        assert response.status_code == 201
        new_job = response.json()["newJob"]
        assert isinstance(new_job["id"], int)
        assert new_job == {**sample_job_data, "equity": "0", "id": new_job["id"]}

    def test_missing_data(self, client, admin_headers):
        """Test job creation with missing required fields"""
        response = client.post("/jobs", json={"handle": "new", "numEmployees": 10}, headers=admin_headers)
        assert response.status_code == 400

    def test_id_not_allowed(self, client, sample_job_data, admin_headers):
        """Test job creation cannot set the id"""
        response = client.post("/jobs", json={**sample_job_data, "id": -9001}, headers=admin_headers)
        assert response.status_code == 400

    def test_wrong_type(self, client, sample_job_data, admin_headers):
        """Test job creation with a non-integer salary"""
        response = client.post("/jobs", json={**sample_job_data, "salary": "lots"}, headers=admin_headers)
        assert response.status_code == 400

    def test_duplicate(self, client, sample_job_data, admin_headers):
        """Test creating the same posting twice"""
        client.post("/jobs", json=sample_job_data, headers=admin_headers)
        response = client.post("/jobs", json=sample_job_data, headers=admin_headers)

        assert response.status_code == 400
        assert "Duplicate" in response.json()["error"]["message"]


class TestJobListing:
    """Tests for GET /jobs"""

    expected = {
        "title": "test job",
        "salary": 60000,
        "equity": "0",
        "company_handle": "c1",
    }

    def test_ok_for_anon(self, client, test_job_id):
        """Test anyone can list jobs"""
        response = client.get("/jobs")

        assert response.status_code == 200
        assert response.json() == {"jobs": [{**self.expected, "id": test_job_id}]}

    def test_valid_filters(self, client, test_job_id):
        """Test listing with valid filters"""
        response = client.get("/jobs?title=test&minSalary=60000&hasEquity=false")

        assert response.status_code == 200
        assert response.json() == {"jobs": [{**self.expected, "id": test_job_id}]}

    def test_unknown_filters_are_ignored(self, client, test_job_id):
        """Test unknown query parameters are ignored"""
        response = client.get("/jobs?nam=blah&employeecount=5&employeestatus=true")

        assert response.status_code == 200
        assert response.json() == {"jobs": [{**self.expected, "id": test_job_id}]}

    def test_min_salary_zero_excludes_unpaid_jobs(self, client, db_session, test_job_id):
        """Test minSalary=0 filters out jobs without a salary"""
        job_crud.create(db_session, JobCreateRequest(title="unpaid job", company_handle="c1"))

        response = client.get("/jobs?minSalary=0")

        assert response.status_code == 200
        assert [job["id"] for job in response.json()["jobs"]] == [test_job_id]

    def test_has_equity_true(self, client):
        """Test hasEquity=true with no equity jobs"""
        response = client.get("/jobs?hasEquity=true")
        assert response.json() == {"jobs": []}

    def test_min_salary_not_an_int(self, client):
        """Test a non-integer minSalary is a bad request"""
        response = client.get("/jobs?minSalary=lots")
        assert response.status_code == 400

    def test_employee_range(self, client):
        """Test minEmployees above maxEmployees is a bad request"""
        response = client.get("/jobs?minEmployees=10&maxEmployees=1")
        assert response.status_code == 400

    def test_database_fault_is_500(self, db_session, user_headers):
        """Test a database failure while listing is a 500"""
        def override_get_db():
            yield db_session

        app.dependency_overrides[get_db] = override_get_db
        db_session.execute(text("DROP TABLE jobs"))
        db_session.commit()

        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.get("/jobs", headers=user_headers)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Internal Server Error"


class TestJobRetrieval:
    """Tests for GET /jobs/{id}"""

    def test_works_for_anon(self, client, test_job_id):
        """Test anyone can read a job"""
        response = client.get(f"/jobs/{test_job_id}")

        assert response.status_code == 200
        assert response.json() == {
            "id": test_job_id,
            "title": "test job",
            "salary": 60000,
            "equity": "0",
            "company_handle": "c1",
        }

    def test_not_found(self, client):
        """Test retrieving a job that doesn't exist"""
        assert client.get("/jobs/99999").status_code == 404

    def test_not_found_for_non_numeric_id(self, client):
        """Test a non-numeric job id is not found"""
        response = client.get("/jobs/nope")
        assert response.status_code == 404
        assert response.json()["error"]["status"] == 404


class TestJobUpdate:
    """Tests for PATCH /jobs/{id}"""

    def test_fails_for_users(self, client, test_job_id, user_headers):
        """Test regular users cannot update jobs"""
        response = client.patch(f"/jobs/{test_job_id}", json={"title": "tested-job"}, headers=user_headers)
        assert response.status_code == 401

    def test_fails_for_anon(self, client, test_job_id):
        """Test anonymous callers cannot update jobs"""
        response = client.patch(f"/jobs/{test_job_id}", json={"title": "new"})
        assert response.status_code == 401

    def test_works_for_admins(self, client, test_job_id, admin_headers):
        """Test admin can update a job"""
        response = client.patch(f"/jobs/{test_job_id}", json={"title": "tested-job"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "job": {
                "id": test_job_id,
                "title": "tested-job",
                "salary": 60000,
                "equity": "0",
                "company_handle": "c1",
            }
        }

    def test_not_found(self, client, admin_headers):
        """Test updating a job that doesn't exist"""
        response = client.patch("/jobs/nope", json={"title": "new nope"}, headers=admin_headers)
        assert response.status_code == 404

    def test_id_change_rejected(self, client, test_job_id, admin_headers):
        """Test the id cannot be changed"""
        response = client.patch(f"/jobs/{test_job_id}", json={"id": "1337"}, headers=admin_headers)
        assert response.status_code == 400

    def test_invalid_data(self, client, test_job_id, admin_headers):
        """Test update with a non-string title"""
        response = client.patch(f"/jobs/{test_job_id}", json={"title": 123}, headers=admin_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["title", "company_handle"])
    def test_required_field_cannot_be_null(self, client, test_job_id, admin_headers, field):
        """Test title and company_handle cannot be set to null"""
        response = client.patch(f"/jobs/{test_job_id}", json={field: None}, headers=admin_headers)

        assert response.status_code == 400
        assert f"{field} cannot be null" in response.json()["error"]["message"][0]

    def test_empty_body(self, client, test_job_id, admin_headers):
        """Test an empty update is rejected"""
        response = client.patch(f"/jobs/{test_job_id}", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "No data"


class TestJobDeletion:
    """Tests for DELETE /jobs/{id}"""

    def test_fails_for_users(self, client, user_headers):
        """Test regular users cannot delete jobs"""
        assert client.delete("/jobs/1", headers=user_headers).status_code == 401

    def test_fails_for_anon(self, client):
        """Test anonymous callers cannot delete jobs"""
        assert client.delete("/jobs/1").status_code == 401

    def test_works_for_admins(self, client, test_job_id, admin_headers):
        """Test admin can delete a job"""
        response = client.delete(f"/jobs/{test_job_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": str(test_job_id)}
        assert client.get(f"/jobs/{test_job_id}").status_code == 404

    def test_not_found(self, client, admin_headers):
        """Test deleting a job that doesn't exist"""
        assert client.delete("/jobs/nope", headers=admin_headers).status_code == 404
