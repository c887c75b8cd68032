"""Shared boolean properties.

Boolean upstream attributes such as ``rain_enabled`` are stored as one
``Property`` node per attribute, shared by every entity that has it, and
linked with ``HAS_PROPERTY`` relationships.
"""

import re
from dataclasses import asdict, dataclass
from typing import Dict


def pretty_print_snake_case(value: str) -> str:
    """Turn ``rain_enabled`` into ``Rain Enabled``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), value.replace("_", " "))


@dataclass(frozen=True)
class PropertyRef:
    """A property by display name and type (the attribute name)."""
    name: str
    type: str

    @classmethod
    def from_attribute(cls, attribute: str) -> "PropertyRef":
        return cls(name=pretty_print_snake_case(attribute), type=attribute)

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary format."""
        return asdict(self)
