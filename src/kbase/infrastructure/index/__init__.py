"""Persisted indexes derived from vault content."""

from kbase.infrastructure.index.links import LinkIndex, LinkIndexBuilder
from kbase.infrastructure.index.tags import TagIndex, TagIndexBuilder

__all__ = ["LinkIndex", "LinkIndexBuilder", "TagIndex", "TagIndexBuilder"]
