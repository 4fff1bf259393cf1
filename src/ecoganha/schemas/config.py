"""Configuration response schemas."""

from ..models import CountingMode
from .common import CamelModel


class CountingModeRead(CamelModel):
    counting_mode: CountingMode
    description: str
