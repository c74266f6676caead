"""User category references supplied by the category store."""

from dataclasses import dataclass
from enum import StrEnum


class CategoryType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class CategoryRef:
    """Read-only snapshot of one of the user's categories."""

    id: str
    name: str
    type: CategoryType

    @classmethod
    def from_mapping(cls, raw: dict[str, object]) -> "CategoryRef":
        """Build from a store row such as ``{"id": ..., "name": ..., "type": "expense"}``."""
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            type=CategoryType(str(raw["type"]).strip().lower()),
        )
