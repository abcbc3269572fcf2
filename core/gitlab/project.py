"""
Read-only query facade over the parsed CI files of a project.
"""
from typing import List, Dict, Any, Optional

from .types import GitLabFile, GitLabJob


class GitLabProject:
    """Parsed GitLab CI files with job and variable lookups"""

    def __init__(self, files: List[GitLabFile]):
        self.files = files

    def get_all_jobs(self) -> List[GitLabJob]:
        """Jobs of every file, in file order then declaration order"""
        return [job for gitlab_file in self.files for job in gitlab_file.jobs.values()]

    def get_jobs_by_file(self, file_path: str) -> List[GitLabJob]:
        gitlab_file = self._find_file(file_path)
        return list(gitlab_file.jobs.values()) if gitlab_file else []

    def get_jobs_with_variable(self, variable_name: str) -> List[GitLabJob]:
        """Jobs declaring variable_name directly; referenced variable blocks are not inspected"""
        return [
            job for job in self.get_all_jobs()
            if isinstance(job.variables, dict) and variable_name in job.variables
        ]

    def get_jobs_by_stage(self, stage: str) -> List[GitLabJob]:
        return [job for job in self.get_all_jobs() if job.stage is not None and job.stage == stage]

    def get_file_variables(self, file_path: str) -> Dict[str, str]:
        gitlab_file = self._find_file(file_path)
        if gitlab_file is None:
            return {}
        return gitlab_file.variables or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert project to dictionary"""
        return {
            "files": [gitlab_file.to_dict() for gitlab_file in self.files],
            "jobs_count": len(self.get_all_jobs())
        }

    def _find_file(self, file_path: str) -> Optional[GitLabFile]:
        for gitlab_file in self.files:
            if gitlab_file.path == file_path:
                return gitlab_file
        return None
