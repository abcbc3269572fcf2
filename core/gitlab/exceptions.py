"""
Errors raised while discovering and parsing GitLab CI files.
"""
from typing import Optional


class GitLabCIError(Exception):
    """Base class for GitLab CI parsing errors"""


class DiscoveryError(GitLabCIError):
    """Raised when CI files cannot be enumerated under a project path"""


class GitLabParseError(GitLabCIError):
    """Raised when a single CI file cannot be read or parsed"""

    def __init__(self, message: str, path: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.path = path
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        return f"{self.message}{location}"


class ReferenceDepthError(GitLabCIError):
    """Raised when a value tree nests deeper than the allowed depth"""
