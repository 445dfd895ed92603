"""Reusable, strict base models for chain JSON payloads and configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class PascalModel(BaseModel):
    """
    A base model that maps snake_case fields onto PascalCase JSON keys.

    The chain daemon speaks Go-style JSON: the field `worker` in a Python
    model is read from and written to `Worker` on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        validate_default=True,
    )


class StrictBaseModel(PascalModel):
    """A strict, immutable pydantic base model."""

    model_config = PascalModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
