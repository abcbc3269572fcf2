"""
GitLab CI endpoints for listing and filtering pipeline jobs.
"""
from typing import Dict, Any, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from core.gitlab import (
    DiscoveryError,
    GitLabParseError,
    GitLabProject,
    GitLabYAMLParser,
)
from core.gitlab.types import GitLabJob, to_plain
from utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["gitlab"])


class GitLabJobResponse(BaseModel):
    """Response model for a single GitLab CI job."""
    name: str
    file_path: str
    script: Any
    before_script: Any = None
    after_script: Any = None
    variables: Any
    stage: Any = None
    needs: Any = None
    dependencies: Any = None
    rules: Any = None
    artifacts: Any = None
    cache: Any = None
    services: Any = None


class GitLabFileResponse(BaseModel):
    """Response model for a parsed CI file."""
    path: str
    variables: Any
    stages: Optional[Any] = None
    include: Optional[Any] = None
    jobs: List[str]


class GitLabProjectResponse(BaseModel):
    """Response model for a parsed project overview."""
    project_path: str
    is_git_repository: bool
    files: List[GitLabFileResponse]
    jobs_count: int


class ParseRequest(BaseModel):
    """Request body for parsing a CI document that is not on disk."""
    content: str
    path: str = ".gitlab-ci.yml"


def load_project(parser: GitLabYAMLParser) -> GitLabProject:
    """Parse the project, mapping discovery failures to 404."""
    try:
        return parser.parse_project()
    except DiscoveryError as e:
        logger.error(f"GitLab CI discovery failed: {e}")
        raise HTTPException(status_code=404, detail=str(e))


def _job_response(job: GitLabJob, file_path: str) -> GitLabJobResponse:
    return GitLabJobResponse(file_path=file_path, **job.to_dict())


@router.get("/gitlab/files", response_model=GitLabProjectResponse)
async def get_gitlab_files(
    project_path: Optional[str] = Query(None, description="Project root (defaults to the Git root)")
):
    """List parsed GitLab CI files with their job names."""
    parser = GitLabYAMLParser(project_path)
    project = load_project(parser)

    files = [
        GitLabFileResponse(
            path=data["path"],
            variables=data["variables"],
            stages=data["stages"],
            include=data["include"],
            jobs=list(data["jobs"]),
        )
        for data in (gitlab_file.to_dict() for gitlab_file in project.files)
    ]

    return GitLabProjectResponse(
        project_path=parser.project_path,
        is_git_repository=parser.is_git_repository(),
        files=files,
        jobs_count=len(project.get_all_jobs()),
    )


@router.get("/gitlab/jobs", response_model=List[GitLabJobResponse])
async def get_gitlab_jobs(
    project_path: Optional[str] = Query(None, description="Project root (defaults to the Git root)"),
    file: Optional[str] = Query(None, description="Only jobs declared in this absolute file path"),
    stage: Optional[str] = Query(None, description="Only jobs assigned to this stage"),
    variable: Optional[str] = Query(None, description="Only jobs declaring this variable"),
):
    """List jobs, optionally filtered by file, stage and variable."""
    project = load_project(GitLabYAMLParser(project_path))

    selections = []
    if file is not None:
        selections.append(project.get_jobs_by_file(file))
    if stage is not None:
        selections.append(project.get_jobs_by_stage(stage))
    if variable is not None:
        selections.append(project.get_jobs_with_variable(variable))
    selected_ids = [{id(job) for job in selection} for selection in selections]

    return [
        _job_response(job, gitlab_file.path)
        for gitlab_file in project.files
        for job in gitlab_file.jobs.values()
        if all(id(job) in ids for ids in selected_ids)
    ]


@router.get("/gitlab/variables", response_model=Dict[str, Any])
async def get_gitlab_variables(
    path: str = Query(..., description="Absolute path of the CI file"),
    project_path: Optional[str] = Query(None, description="Project root (defaults to the Git root)"),
):
    """Get the file-level variables of a CI file."""
    project = load_project(GitLabYAMLParser(project_path))
    return to_plain(project.get_file_variables(path))


@router.post("/gitlab/parse")
async def parse_gitlab_document(request: ParseRequest):
    """Parse a posted CI document and return its file model."""
    parser = GitLabYAMLParser(project_path=".")
    try:
        gitlab_file = parser.parse_content(request.content, request.path)
    except GitLabParseError as e:
        raise HTTPException(status_code=422, detail={
            "message": e.message,
            "line": e.line,
            "column": e.column,
        })
    return gitlab_file.to_dict()
