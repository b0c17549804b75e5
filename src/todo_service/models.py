from __future__ import annotations

from enum import Enum
from typing import TypedDict


# PUBLIC_INTERFACE
class Category(str, Enum):
    """Closed set of todo categories."""

    WORK = "WORK"
    HOME = "HOME"
    LEARNING = "LEARNING"


# PUBLIC_INTERFACE
class Priority(str, Enum):
    """Closed set of todo priorities."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# PUBLIC_INTERFACE
class Status(str, Enum):
    """Closed set of todo statuses. No transition rules apply between them."""

    TO_DO = "TO DO"
    IN_PROGRESS = "IN PROGRESS"
    DONE = "DONE"


# Fields a client may set on create or update, in storage order.
TODO_FIELDS = ("todo", "category", "priority", "status", "dueDate")


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a stored Todo document.

    Fields:
    - id: 24-hex ObjectId string assigned by the store
    - todo: free-text description
    - category: one of Category values
    - priority: one of Priority values
    - status: one of Status values
    - dueDate: calendar date as 'yyyy-MM-dd'
    """

    id: str
    todo: str
    category: str
    priority: str
    status: str
    dueDate: str
