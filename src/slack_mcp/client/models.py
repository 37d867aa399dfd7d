"""Slack client value types."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TokenType(str, Enum):
    """Which kind of Slack token the client authenticates with."""

    BOT = "bot"
    USER = "user"


class CanvasOperation(str, Enum):
    INSERT_AT_START = "insert_at_start"
    INSERT_AT_END = "insert_at_end"
    INSERT_BEFORE = "insert_before"
    INSERT_AFTER = "insert_after"
    REPLACE = "replace"
    DELETE = "delete"


class DocumentContent(BaseModel):
    """Markdown body attached to a canvas change."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["markdown"] = "markdown"
    markdown: str


class CanvasChange(BaseModel):
    """One edit passed to ``canvases.edit``.

    ``insert_before``/``insert_after`` need a ``section_id``; every
    operation except ``delete`` needs ``document_content``.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    operation: CanvasOperation
    section_id: Optional[str] = None
    document_content: Optional[DocumentContent] = Field(default=None)

    @model_validator(mode="after")
    def _check_operation_fields(self) -> "CanvasChange":
        operation = CanvasOperation(self.operation)
        if operation in (CanvasOperation.INSERT_BEFORE, CanvasOperation.INSERT_AFTER) and not self.section_id:
            raise ValueError(f"section_id is required for {operation.value}")
        if operation is not CanvasOperation.DELETE and self.document_content is None:
            raise ValueError(f"document_content is required for {operation.value}")
        return self
