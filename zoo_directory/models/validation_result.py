"""Validation result models."""

from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class ValidationResult(BaseModel, Generic[T]):
    """Outcome of validating one CMS value.

    Errors mean the value is unusable for its purpose, warnings mean it was
    defaulted or is imperfect. Neither is ever raised.
    """
    is_valid: bool
    data: Optional[T] = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class RejectedRecord(BaseModel):
    """A collection element that failed validation, kept with its defaulted data."""
    index: int
    data: Any
    errors: list[str] = Field(default_factory=list)


class CollectionResult(BaseModel):
    """Outcome of validating a whole CMS payload.

    `data` holds the listings that can be linked to (input order kept);
    `rejected` holds the rest. `extra` carries wrapper keys such as `totalCount`.
    For a single-record payload `single` is set instead of `data`.
    """
    is_valid: bool
    data: list[Any] = Field(default_factory=list)
    single: Optional[Any] = None
    rejected: list[RejectedRecord] = Field(default_factory=list)
    extra: dict = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
