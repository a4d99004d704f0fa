"""Base Pydantic schemas for term-bench.

Provides the common base classes for all models: a mutable schema for
documents assembled incrementally and a frozen schema for values that
must never change once constructed (specs, run results).
"""

from pydantic import BaseModel, ConfigDict

__all__ = ["BaseSchema", "FrozenSchema"]


class BaseSchema(BaseModel):
    """Base model for all Pydantic schemas.

    - from_attributes: Allow construction from arbitrary objects
    - str_strip_whitespace: Automatically strip whitespace from strings
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class FrozenSchema(BaseSchema):
    """Immutable, hashable schema."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        frozen=True,
    )
