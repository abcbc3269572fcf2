"""
Shared types and models for GitLab CI pipeline definitions.
"""
from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass, field
from abc import ABC, abstractmethod


@dataclass(frozen=True)
class GitLabTag(ABC):
    """Value produced by a GitLab-specific YAML tag"""
    value: Any

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert tagged value to dictionary"""
        pass


@dataclass(frozen=True)
class GitLabReference(GitLabTag):
    """Value tagged with !reference, e.g. [.scripts, build_script]"""

    def to_dict(self) -> Dict[str, Any]:
        return {"is_reference": True, "value": to_plain(self.value)}


@dataclass(frozen=True)
class GitLabInclude(GitLabTag):
    """Value tagged with !include"""

    def to_dict(self) -> Dict[str, Any]:
        return {"is_include": True, "value": to_plain(self.value)}


ScriptValue = Union[List[str], GitLabReference]
VariablesValue = Union[Dict[str, str], GitLabReference]


def to_plain(value: Any) -> Any:
    """Convert a parsed value tree into JSON-friendly data"""
    if isinstance(value, GitLabTag):
        return value.to_dict()
    if isinstance(value, dict):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class GitLabJob:
    """Represents a job declared at the top level of a CI file"""
    name: str
    script: ScriptValue = field(default_factory=list)
    before_script: Optional[ScriptValue] = None
    after_script: Optional[ScriptValue] = None
    variables: VariablesValue = field(default_factory=dict)
    stage: Optional[str] = None
    needs: Optional[Any] = None
    dependencies: Optional[Any] = None
    rules: Optional[Any] = None
    artifacts: Optional[Any] = None
    cache: Optional[Any] = None
    services: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary"""
        return {
            "name": self.name,
            "script": to_plain(self.script),
            "before_script": to_plain(self.before_script),
            "after_script": to_plain(self.after_script),
            "variables": to_plain(self.variables),
            "stage": to_plain(self.stage),
            "needs": to_plain(self.needs),
            "dependencies": to_plain(self.dependencies),
            "rules": to_plain(self.rules),
            "artifacts": to_plain(self.artifacts),
            "cache": to_plain(self.cache),
            "services": to_plain(self.services)
        }


@dataclass(frozen=True)
class GitLabFile:
    """Represents one parsed CI definition file"""
    path: str
    jobs: Dict[str, GitLabJob] = field(default_factory=dict)
    variables: Dict[str, str] = field(default_factory=dict)
    stages: Optional[List[str]] = None
    include: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert file to dictionary"""
        return {
            "path": self.path,
            "variables": to_plain(self.variables),
            "jobs": {name: job.to_dict() for name, job in self.jobs.items()},
            "stages": to_plain(self.stages),
            "include": to_plain(self.include)
        }
