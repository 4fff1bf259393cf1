"""Shared schema base and projections."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models import UserRole


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserSummary(CamelModel):
    """Lightweight projection of a user and their balance."""

    id: int
    name: str
    phone: str
    role: UserRole
    points: int
