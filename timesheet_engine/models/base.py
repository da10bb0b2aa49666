"""Base model for all data models in the timesheet engine.

This module provides a base Pydantic model with the configuration shared by
entities, request DTOs and read models.
"""

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Entities are mutable (the service changes hours and status in place and
    hands them back to the repository), so assignments are re-validated.

    Example:
        >>> class Sample(BaseDataModel):
        ...     hours: int
        >>> sample = Sample(hours=4)
        >>> sample.model_dump()
        {'hours': 4}
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="forbid",
        frozen=False,
    )
