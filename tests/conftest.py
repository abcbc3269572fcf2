import os
import pytest
from unittest.mock import patch

# Set test environment variables before importing app modules
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000"
os.environ["PROJECT_PATH"] = ""


MAIN_CI = """
stages:
  - build
  - test
  - deploy

variables:
  GLOBAL_VAR: global_value

.scripts:
  build_script:
    - npm run build

build-job:
  stage: build
  script:
    - echo "Building..."
  variables:
    NODE_VERSION: "18"

test-job:
  stage: test
  script: !reference [.scripts, build_script]
  variables:
    TEST_ENV: "true"

deploy-job:
  stage: deploy
  script:
    - echo "Deploying..."
"""

INCLUDED_CI = """
include-job:
  stage: test
  script:
    - echo "From include"
"""


@pytest.fixture(autouse=True)
def mock_settings():
    """Mock settings for all tests."""
    with patch.dict(os.environ, {
        "LOG_LEVEL": "DEBUG",
        "ALLOWED_ORIGINS": "http://localhost:3000",
    }):
        yield


@pytest.fixture
def gitlab_project_dir(tmp_path):
    """A project with a main CI file and one file under .gitlab/."""
    (tmp_path / ".git").mkdir()
    (tmp_path / ".gitlab-ci.yml").write_text(MAIN_CI)
    (tmp_path / ".gitlab").mkdir()
    (tmp_path / ".gitlab" / "include.yml").write_text(INCLUDED_CI)
    return tmp_path
