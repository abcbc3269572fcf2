"""
GitLab CI parser
Discovers .gitlab-ci.yml and .gitlab/ files and converts them into job models
"""

from typing import List, Dict, Any, Optional
from pathlib import Path

from core.config import settings
from core.git import find_git_root, is_git_repository
from .exceptions import DiscoveryError, GitLabParseError
from .project import GitLabProject
from .schema import GitLabYAMLSchema, GitLabReferenceResolver
from .types import GitLabFile, GitLabJob, GitLabTag
from utils.logger import get_logger

logger = get_logger(__name__)

RESERVED_KEYS = frozenset({"variables", "stages", "include"})

JOB_FIELDS = (
    "before_script",
    "after_script",
    "stage",
    "needs",
    "dependencies",
    "rules",
    "artifacts",
    "cache",
    "services",
)


def is_job_key(key: str) -> bool:
    """Hidden (.-prefixed) and reserved top-level keys never become jobs"""
    return not key.startswith(".") and key not in RESERVED_KEYS


class GitLabYAMLParser:
    """Parser for the GitLab CI files of a single project"""

    def __init__(self, project_path: Optional[str] = None,
                 schema: Optional[GitLabYAMLSchema] = None,
                 patterns: Optional[List[str]] = None):
        if project_path is None:
            project_path = settings.project_path or find_git_root()
        self._project_path = str(project_path)
        self.schema = schema if schema is not None else GitLabYAMLSchema()
        self.patterns = list(patterns) if patterns is not None else settings.gitlab_ci_patterns_list

    @property
    def project_path(self) -> str:
        """The project root files are discovered under"""
        return self._project_path

    def is_git_repository(self) -> bool:
        """Check if the project path is a Git repository root"""
        return is_git_repository(self._project_path)

    def parse_project(self) -> GitLabProject:
        """
        Parse every CI file of the project

        Files that fail to parse are logged and left out of the result.

        Returns:
            GitLabProject over the successfully parsed files

        Raises:
            DiscoveryError: If the project files cannot be enumerated
        """
        file_paths = self.find_gitlab_files()
        parsed_files: List[GitLabFile] = []

        for file_path in file_paths:
            try:
                parsed_files.append(self.parse_file(file_path))
            except GitLabParseError as e:
                logger.warning(f"Failed to parse {file_path}: {e}")

        self._log_name_collisions(parsed_files)
        logger.info(f"Parsed {len(parsed_files)} of {len(file_paths)} GitLab CI files in {self._project_path}")
        return GitLabProject(parsed_files)

    def find_gitlab_files(self) -> List[str]:
        """Return absolute paths of CI files under the project, without duplicates"""
        root = Path(self._project_path).absolute()
        if not root.is_dir():
            raise DiscoveryError(f"Project path is not a directory: {self._project_path}")

        found: Dict[str, None] = {}
        try:
            for pattern in self.patterns:
                matches = sorted(str(p) for p in root.glob(pattern) if p.is_file())
                for match in matches:
                    found.setdefault(match, None)
        except OSError as e:
            raise DiscoveryError(f"Failed to enumerate GitLab CI files in {self._project_path}: {e}") from e

        return list(found)

    def parse_file(self, file_path: str) -> GitLabFile:
        """
        Parse a single CI file

        Raises:
            GitLabParseError: If the file cannot be read or is not a YAML mapping
        """
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise GitLabParseError(f"Failed to read {file_path}: {e}", path=file_path) from e

        return self.parse_content(content, file_path)

    def parse_content(self, content: str, file_path: str) -> GitLabFile:
        """Parse CI YAML text that belongs to file_path"""
        yaml_content, key_text = self.schema.parse_document(content, path=file_path)

        if not isinstance(yaml_content, dict):
            raise GitLabParseError(f"Invalid YAML content in {file_path}", path=file_path)

        jobs: Dict[str, GitLabJob] = {}
        for key, value in yaml_content.items():
            # Job names keep their source text, so `on:` stays "on" rather than "True"
            name = key_text.get(key, str(key))
            if not is_job_key(name):
                continue
            if isinstance(value, (dict, list, GitLabTag)):
                jobs[name] = self.parse_job(name, value if isinstance(value, dict) else {})

        return GitLabFile(
            path=file_path,
            jobs=jobs,
            variables=yaml_content.get("variables") or {},
            stages=yaml_content.get("stages"),
            include=yaml_content.get("include"),
        )

    def parse_job(self, name: str, job_data: Dict[str, Any]) -> GitLabJob:
        """Copy job fields as declared; script and variables get empty defaults"""
        return GitLabJob(
            name=name,
            script=job_data.get("script") or [],
            variables=job_data.get("variables") or {},
            **{field_name: job_data.get(field_name) for field_name in JOB_FIELDS}
        )

    def is_reference(self, value: Any) -> bool:
        return GitLabReferenceResolver.is_reference(value)

    def is_include(self, value: Any) -> bool:
        return GitLabReferenceResolver.is_include(value)

    def extract_reference_value(self, value: Any) -> Any:
        return GitLabReferenceResolver.extract_value(value)

    def resolve_references(self, data: Any, context: Any = None) -> Any:
        return GitLabReferenceResolver.resolve_references(data, context)

    @staticmethod
    def _log_name_collisions(files: List[GitLabFile]) -> None:
        seen: Dict[str, str] = {}
        for gitlab_file in files:
            for name in gitlab_file.jobs:
                if name in seen:
                    logger.debug(f"Job {name} declared in both {seen[name]} and {gitlab_file.path}")
                else:
                    seen[name] = gitlab_file.path
