"""
Git repository helpers.
"""

from .repository import find_git_root, is_git_repository

__all__ = [
    'find_git_root',
    'is_git_repository'
]
