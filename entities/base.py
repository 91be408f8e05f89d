"""
Shared base for persisted entities.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import Field

from common.ransackable import RansackableModel

E = TypeVar("E", bound="Entity")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse Supabase ISO timestamps (with a trailing `Z`) into datetimes."""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        return None


class Entity(RansackableModel):
    """
    Row of a Supabase table with integer id and audit timestamps.
    """

    id: int = Field(..., description="Primary key")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    class Config:
        from_attributes = True
        use_enum_values = True

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        """Create an entity from a Supabase row."""
        data = dict(data)
        for key in ("created_at", "updated_at"):
            if isinstance(data.get(key), str):
                data[key] = parse_timestamp(data[key])
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = self.model_dump()
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, Decimal):
                data[key] = float(value)
            elif isinstance(value, Enum):
                data[key] = value.value
        return data
