"""Resource filtering.

The browse pages narrow the resource list by type, free text and
availability. ``ResourceFilter`` holds those criteria and can be built
from request query parameters::

    GET /api/resources?type=food&type=water&q=church&available=true

Types may also be given comma separated (``type=food,water``). A
filter with no criteria matches everything.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..errors import ValidationError
from ..models import Resource, RESOURCE_TYPES

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class ResourceFilter:
    types: tuple[str, ...] = ()
    query: str = ""
    available_only: bool = False

    @classmethod
    def from_args(cls, args) -> Optional["ResourceFilter"]:
        """Build a filter from a werkzeug ``MultiDict`` of query args.

        Returns ``None`` when no criteria were supplied.
        """
        types: List[str] = []
        for value in args.getlist("type"):
            types.extend(t.strip().lower() for t in value.split(",") if t.strip())
        unknown = sorted(set(types) - set(RESOURCE_TYPES))
        if unknown:
            raise ValidationError(
                "Unknown resource type.",
                fields={"type": [f"Must be one of: {', '.join(RESOURCE_TYPES)}."]},
            )

        raw_available = args.get("available", "").strip().lower()
        if raw_available not in TRUE_VALUES | FALSE_VALUES:
            raise ValidationError("Invalid filter.", fields={"available": ["Not a valid boolean."]})

        resource_filter = cls(
            types=tuple(dict.fromkeys(types)),
            query=args.get("q", "").strip(),
            available_only=raw_available in TRUE_VALUES,
        )
        return None if resource_filter.is_empty else resource_filter

    @property
    def is_empty(self) -> bool:
        return not self.types and not self.query and not self.available_only

    def matches(self, resource: Resource) -> bool:
        if self.types and not any(t in self.types for t in resource.types or ()):
            return False
        if self.query:
            needle = self.query.lower()
            haystacks = (resource.title, resource.description, resource.location)
            if not any(needle in (text or "").lower() for text in haystacks):
                return False
        if self.available_only and not resource.available:
            return False
        return True

    def apply(self, resources: Iterable[Resource]) -> List[Resource]:
        return [r for r in resources if self.matches(r)]
