from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import Category, Priority, Status


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Enumerated fields and dueDate are accepted as-is here and checked by
    `validation.validate_todo`, so that bad values produce the service's own
    400 messages. Unknown keys, including a client-supplied id, are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "todo": "Write report",
                "category": "WORK",
                "priority": "HIGH",
                "status": "TO DO",
                "dueDate": "2024-03-01",
            }
        },
    )

    todo: Any = Field(default=None, description="Free-text description of the task")
    category: Any = Field(default=None, description="One of WORK, HOME, LEARNING")
    priority: Any = Field(default=None, description="One of HIGH, MEDIUM, LOW")
    status: Any = Field(default=None, description="One of TO DO, IN PROGRESS, DONE")
    dueDate: Any = Field(
        default=None,
        description="Due date. Any parseable date or datetime; stored as yyyy-MM-dd",
    )


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "65e1c3f2a1b2c3d4e5f60718",
                "todo": "Write report",
                "category": "WORK",
                "priority": "HIGH",
                "status": "TO DO",
                "dueDate": "2024-03-01",
            }
        }
    )

    id: str = Field(..., description="Store-assigned identifier (24-hex ObjectId)")
    todo: str = Field(..., description="Free-text description of the task")
    category: Category = Field(..., description="Todo category")
    priority: Priority = Field(..., description="Todo priority")
    status: Status = Field(..., description="Todo status")
    dueDate: date = Field(..., description="Due date as yyyy-MM-dd")
