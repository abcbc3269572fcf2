"""
YAML schema for GitLab CI configuration files
Adds constructors for the !reference and !include tags
"""

from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from yaml.constructor import ConstructorError

from core.config import settings
from .exceptions import GitLabParseError, ReferenceDepthError
from .types import GitLabTag, GitLabReference, GitLabInclude

REFERENCE_TAG = "!reference"
INCLUDE_TAG = "!include"


def _construct_node(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    """Build the untagged value of a node, whatever its kind"""
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)


def _construct_reference(loader: yaml.SafeLoader, node: yaml.Node) -> GitLabReference:
    return GitLabReference(_construct_node(loader, node))


def _construct_include(loader: yaml.SafeLoader, node: yaml.Node) -> GitLabInclude:
    if isinstance(node, yaml.MappingNode):
        raise ConstructorError(
            None, None,
            f"{INCLUDE_TAG} is not supported on a mapping node",
            node.start_mark
        )
    return GitLabInclude(_construct_node(loader, node))


def _represent_reference(dumper: yaml.SafeDumper, data: GitLabReference) -> yaml.Node:
    # Only the wrapped value is written; the tag itself is not emitted
    return dumper.represent_data(data.value)


def _represent_tag_fields(dumper: yaml.SafeDumper, data: GitLabTag) -> yaml.Node:
    return dumper.represent_dict(data.to_dict())


class GitLabYAMLSchema:
    """
    Loader and dumper configuration for GitLab CI YAML.

    Each instance builds its own SafeLoader/SafeDumper subclasses, so
    registering tags here never touches PyYAML's global classes.
    """

    def __init__(self, extra_constructors: Optional[Dict[str, Callable]] = None):
        self._loader = type("GitLabLoader", (yaml.SafeLoader,), {})
        self._dumper = type("GitLabDumper", (yaml.SafeDumper,), {})

        self._loader.add_constructor(REFERENCE_TAG, _construct_reference)
        self._loader.add_constructor(INCLUDE_TAG, _construct_include)
        for tag, constructor in (extra_constructors or {}).items():
            self._loader.add_constructor(tag, constructor)

        self._dumper.add_representer(GitLabReference, _represent_reference)
        self._dumper.add_multi_representer(GitLabTag, _represent_tag_fields)

    @property
    def loader(self) -> type:
        return self._loader

    @property
    def dumper(self) -> type:
        return self._dumper

    def parse_yaml(self, content: str, path: Optional[str] = None) -> Any:
        """
        Parse YAML content with GitLab tag support

        Args:
            content: Raw YAML text
            path: Optional source path, used in error messages

        Returns:
            Parsed value tree

        Raises:
            GitLabParseError: If the content is not valid YAML
        """
        data, _ = self.parse_document(content, path)
        return data

    def parse_document(self, content: str, path: Optional[str] = None) -> Tuple[Any, Dict[Any, str]]:
        """
        Parse YAML content and keep the source text of top-level keys

        Plain keys such as `on` or `1` are constructed as booleans and
        numbers; the second result maps each constructed top-level key back
        to the text written in the file.

        Raises:
            GitLabParseError: If the content is not valid YAML
        """
        loader = self._loader(content)
        try:
            node = loader.get_single_node()
            if node is None:
                return None, {}
            data = loader.construct_document(node)
            return data, self._top_level_key_text(loader, node)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            problem = getattr(e, "problem", None) or str(e)
            raise self._parse_error(problem, path, mark) from e
        except (ValueError, RecursionError) as e:
            # Scalar constructors (e.g. timestamps) and the composer raise these directly
            raise self._parse_error(f"{type(e).__name__}: {e}", path, None) from e
        finally:
            loader.dispose()

    @staticmethod
    def _top_level_key_text(loader: yaml.SafeLoader, node: yaml.Node) -> Dict[Any, str]:
        if not isinstance(node, yaml.MappingNode):
            return {}
        key_text: Dict[Any, str] = {}
        # node.value is already flattened by construct_document, merge keys included
        for key_node, _ in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key_text.setdefault(loader.construct_object(key_node), key_node.value)
        return key_text

    @staticmethod
    def _parse_error(problem: str, path: Optional[str], mark) -> GitLabParseError:
        message = f"Invalid YAML in {path}: {problem}" if path else f"Invalid YAML: {problem}"
        return GitLabParseError(
            message,
            path=path,
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
        )

    def stringify_yaml(self, data: Any) -> str:
        """Serialize a value tree; references are written as their wrapped value"""
        return yaml.dump(
            data,
            Dumper=self._dumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


class GitLabReferenceResolver:
    """Utility functions for working with GitLab references"""

    @staticmethod
    def is_reference(value: Any) -> bool:
        """Check if a value is a GitLab reference"""
        return isinstance(value, GitLabReference)

    @staticmethod
    def is_include(value: Any) -> bool:
        """Check if a value is a GitLab include"""
        return isinstance(value, GitLabInclude)

    @staticmethod
    def extract_value(value: Any) -> Any:
        """Extract the wrapped value from a reference or include"""
        if isinstance(value, GitLabTag):
            return value.value
        return value

    @classmethod
    def resolve_references(cls, data: Any, context: Any = None,
                           max_depth: Optional[int] = None) -> Any:
        """
        Resolve references in a GitLab job or file.

        References are currently returned as-is; context is accepted for
        future lookups of the referenced paths but is not consulted yet.

        Raises:
            ReferenceDepthError: If data nests deeper than max_depth
        """
        if max_depth is None:
            max_depth = settings.max_reference_depth
        return cls._resolve(data, context, 0, max_depth)

    @classmethod
    def _resolve(cls, data: Any, context: Any, depth: int, max_depth: int) -> Any:
        if depth > max_depth:
            raise ReferenceDepthError(f"Value nesting exceeds maximum depth of {max_depth}")

        if isinstance(data, list):
            return [cls._resolve(item, context, depth + 1, max_depth) for item in data]

        if isinstance(data, GitLabReference):
            return data

        if isinstance(data, GitLabInclude):
            return GitLabInclude(cls._resolve(data.value, context, depth + 1, max_depth))

        if isinstance(data, dict):
            return {
                key: cls._resolve(value, context, depth + 1, max_depth)
                for key, value in data.items()
            }

        return data
