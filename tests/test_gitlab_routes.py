from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_list_files(gitlab_project_dir):
    """Test the parsed file overview."""
    response = client.get("/api/gitlab/files", params={"project_path": str(gitlab_project_dir)})
    assert response.status_code == 200

    data = response.json()
    assert data["project_path"] == str(gitlab_project_dir)
    assert data["is_git_repository"] is True
    assert data["jobs_count"] == 4
    assert [f["jobs"] for f in data["files"]] == [
        ["build-job", "test-job", "deploy-job"],
        ["include-job"],
    ]


def test_list_jobs(gitlab_project_dir):
    """Test listing every job with its source file."""
    response = client.get("/api/gitlab/jobs", params={"project_path": str(gitlab_project_dir)})
    assert response.status_code == 200

    jobs = response.json()
    assert [job["name"] for job in jobs] == ["build-job", "test-job", "deploy-job", "include-job"]
    assert jobs[3]["file_path"] == str(gitlab_project_dir / ".gitlab" / "include.yml")
    assert jobs[1]["script"] == {"is_reference": True, "value": [".scripts", "build_script"]}


def test_filter_jobs_by_stage(gitlab_project_dir):
    response = client.get(
        "/api/gitlab/jobs",
        params={"project_path": str(gitlab_project_dir), "stage": "test"},
    )
    assert [job["name"] for job in response.json()] == ["test-job", "include-job"]


def test_filter_jobs_combined(gitlab_project_dir):
    """Test that filters are combined."""
    response = client.get(
        "/api/gitlab/jobs",
        params={
            "project_path": str(gitlab_project_dir),
            "file": str(gitlab_project_dir / ".gitlab-ci.yml"),
            "variable": "TEST_ENV",
        },
    )
    assert [job["name"] for job in response.json()] == ["test-job"]


def test_file_variables(gitlab_project_dir):
    response = client.get(
        "/api/gitlab/variables",
        params={
            "project_path": str(gitlab_project_dir),
            "path": str(gitlab_project_dir / ".gitlab-ci.yml"),
        },
    )
    assert response.status_code == 200
    assert response.json() == {"GLOBAL_VAR": "global_value"}


def test_file_variables_unknown_path(gitlab_project_dir):
    response = client.get(
        "/api/gitlab/variables",
        params={"project_path": str(gitlab_project_dir), "path": "/unknown.yml"},
    )
    assert response.json() == {}


def test_missing_project_returns_404(tmp_path):
    response = client.get("/api/gitlab/jobs", params={"project_path": str(tmp_path / "missing")})
    assert response.status_code == 404


def test_parse_document():
    response = client.post("/api/gitlab/parse", json={
        "content": "stages: [build]\n.hidden: {script: [x]}\nbuild: {stage: build, script: [make]}\n",
        "path": "/virtual/.gitlab-ci.yml",
    })
    assert response.status_code == 200

    data = response.json()
    assert data["path"] == "/virtual/.gitlab-ci.yml"
    assert list(data["jobs"]) == ["build"]
    assert data["stages"] == ["build"]


def test_parse_invalid_document():
    response = client.post("/api/gitlab/parse", json={"content": "job: [unclosed\n"})
    assert response.status_code == 422
    assert response.json()["detail"]["line"] is not None


def test_parse_document_with_invalid_timestamp():
    response = client.post("/api/gitlab/parse", json={"content": "job:\n  variables:\n    CUTOFF: 2024-13-45\n"})
    assert response.status_code == 422
    assert "month must be in 1..12" in response.json()["detail"]["message"]
