"""Map receipt item text to one of the user's categories."""

from collections.abc import Sequence

from dompet.domain.category import CategoryRef, CategoryType
from dompet.domain.keywords import KeywordFamily, contains_any, first_matching_family
from dompet.receipt.keyword_rules import get_default_receipt_rules


def default_expense_category(categories: Sequence[CategoryRef]) -> CategoryRef | None:
    """Return the first expense category in list order."""
    for category in categories:
        if category.type == CategoryType.EXPENSE:
            return category
    return None


def category_for_family(family: KeywordFamily, categories: Sequence[CategoryRef]) -> CategoryRef | None:
    """Return the first category whose name contains one of the family synonyms."""
    for category in categories:
        if contains_any(category.name, family.category_synonyms):
            return category
    return None


def match_category(
    text: str,
    categories: Sequence[CategoryRef],
    families: Sequence[KeywordFamily] | None = None,
) -> CategoryRef | None:
    """
    Pick a category for item text using keyword families.

    The first family (in table order) with a keyword in the text decides the
    category. When no family matches, or the user has no category for that
    family, the first expense category is used. Returns None when the list
    has no expense category.
    """
    if not categories:
        return None

    families = get_default_receipt_rules().families if families is None else families
    family = first_matching_family(text, families)
    if family is not None:
        category = category_for_family(family, categories)
        if category is not None:
            return category
    return default_expense_category(categories)
