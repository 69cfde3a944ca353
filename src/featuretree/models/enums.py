"""Shared enums for models."""

from enum import Enum


class StatusFilter(str, Enum):
    """Feature status filters used by the tree query."""

    ALL = "all"
    COMPLETED = "completed"
    NOT_COMPLETED = "not-completed"
    WITH_ACCOUNTING = "with-accounting"
    WITHOUT_ACCOUNTING = "without-accounting"
    ACCOUNTING_DONE = "accounting-done"


class TreeMode(str, Enum):
    """Shape of a tree query result."""

    TREE = "tree"
    FLAT = "flat"
