"""Keyword-family lookup shared by category matching and essential detection."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class KeywordFamily:
    """A named group of keywords plus the category-name synonyms it resolves to.

    Example: the ``beverage`` family matches item text containing ``teh`` or
    ``kopi`` and resolves to a category named ``Minuman`` or ``Beverage``.
    """

    name: str
    keywords: tuple[str, ...]
    category_synonyms: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        return contains_any(text, self.keywords)


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test of any keyword against text."""
    lowered = text.lower()
    return any(kw.lower() in lowered for kw in keywords if kw)


def first_matching_family(text: str, families: Sequence[KeywordFamily]) -> KeywordFamily | None:
    """Return the first family (in table order) with a keyword found in text."""
    for family in families:
        if family.matches(text):
            return family
    return None
