"""
GitLab CI module for discovering, parsing and querying pipeline definitions
Supports the !reference and !include YAML tags
"""

from .exceptions import GitLabCIError, DiscoveryError, GitLabParseError, ReferenceDepthError
from .parser import GitLabYAMLParser
from .project import GitLabProject
from .schema import GitLabYAMLSchema, GitLabReferenceResolver
from .types import GitLabFile, GitLabJob, GitLabTag, GitLabReference, GitLabInclude

__all__ = [
    'GitLabCIError',
    'DiscoveryError',
    'GitLabParseError',
    'ReferenceDepthError',
    'GitLabYAMLParser',
    'GitLabProject',
    'GitLabYAMLSchema',
    'GitLabReferenceResolver',
    'GitLabFile',
    'GitLabJob',
    'GitLabTag',
    'GitLabReference',
    'GitLabInclude'
]
