"""Cypher query construction.

This module handles:
- Parameterized equality predicates from field/value filters
- Labeled node selections and relationship patterns
- Identifier checks for the parts of a statement that cannot be parameters
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional

# Relationship directions, relative to the start node of a pattern
FROM = "from"
TO = "to"
BOTH = "both"
NONE = "none"

DIRECTIONS = (FROM, TO, BOTH, NONE)

# Labels, variables, relationship types and property keys are written into
# query text, so they are restricted to plain identifiers
IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(value: str, kind: str = "identifier") -> str:
    """Return ``value`` if it is safe to place in query text.

    Args:
        value: Label, variable, relationship type or property key
        kind: Used in the error message

    Raises:
        ValueError: If ``value`` is not a plain identifier
    """
    if not isinstance(value, str) or not IDENTIFIER.match(value):
        raise ValueError(f"Invalid {kind}: {value!r}")
    return value


def check_direction(direction: str) -> str:
    """Return ``direction`` if it is one of ``DIRECTIONS``."""
    if direction not in DIRECTIONS:
        raise ValueError(
            f"Invalid direction {direction!r}, expected one of {', '.join(DIRECTIONS)}"
        )
    return direction


@dataclass(frozen=True)
class NodeRef:
    """Points at a single node by label and a unique property.

    Entities are addressed by their upstream ``id``; property nodes by
    their ``type``.
    """
    label: Optional[str]
    value: Any
    key: str = "id"

    def __str__(self) -> str:
        return f"{self.label or ''}({self.key}={self.value!r})"


@dataclass
class NodeSelection:
    """A labeled node bound to a query variable."""
    variable: str
    label: Optional[str] = None


@dataclass
class RelationshipPattern:
    """A typed relationship between two selected variables."""
    start: str
    end: str
    direction: str = FROM
    label: Optional[str] = None
    variable: Optional[str] = None

    def render(self, variable: Optional[str] = None, direction: Optional[str] = None) -> str:
        """Render the pattern in Cypher arrow syntax.

        ``both`` and ``none`` render as an undirected pattern, which
        matches a relationship stored in either direction.
        """
        variable = self.variable if variable is None else variable
        direction = direction or self.direction
        inner = (variable or "") + (f":{self.label}" if self.label else "")
        rel = f"[{inner}]"
        if direction == FROM:
            return f"({self.start})-{rel}->({self.end})"
        if direction == TO:
            return f"({self.start})<-{rel}-({self.end})"
        return f"({self.start})-{rel}-({self.end})"


def relationship_patterns(pattern: RelationshipPattern) -> List[str]:
    """Patterns needed to MERGE ``pattern``.

    ``both`` merges one relationship in each direction; every other
    direction needs a single pattern.
    """
    if pattern.direction != BOTH:
        return [pattern.render()]
    inbound = f"{pattern.variable}_in" if pattern.variable else None
    return [pattern.render(direction=FROM), pattern.render(variable=inbound, direction=TO)]
