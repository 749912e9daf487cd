"""Shared testing fixtures for the docquiz test suite."""

from .documents import make_block, make_document  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "WorkspaceBuilder",
    "build_tree",
    "make_block",
    "make_document",
]
