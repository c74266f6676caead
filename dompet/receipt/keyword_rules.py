"""Keyword tables for receipt parsing: denylist, category families, fallbacks.

Built-in tables cover Indonesian convenience-store receipts. Extra layers
come from TOML (packaged ``default_receipt_rules.toml`` and the project's
``receipt_rules.toml``) and are merged in order by
build_receipt_keyword_rules():

- ``denylist`` entries are appended;
- a ``[[families]]`` entry with a known ``name`` extends that family,
  an unknown name appends a new family after the built-in ones;
- scalar settings (fallback label, bounds, amount format) replace earlier ones.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from dompet.domain.keywords import KeywordFamily
from dompet.domain.receipt import DEFAULT_CURRENCY_MARKERS, AmountFormat

# Storefront, header and footer tokens that never describe a purchased item
DENYLIST: tuple[str, ...] = (
    "indomaret",
    "alfamart",
    "tokopedia",
    "shopee",
    "lazada",
    "total",
    "jumlah",
    "harga jual",
    "voucher",
    "diskon",
    "tunai",
    "kembali",
    "ppn",
    "dpp",
    "terima kasih",
    "layanan konsumen",
    "sms",
    "call",
    "email",
    "npwp",
    "alamat",
    "telp",
    "fax",
    "website",
    "tanggal",
    "jam",
)

FAMILIES: tuple[KeywordFamily, ...] = (
    KeywordFamily(
        name="food",
        keywords=("indomi", "sedap", "mie", "nasi", "goreng", "soto", "kari", "ayam", "bawang", "rica", "baso"),
        category_synonyms=("makanan", "food"),
    ),
    KeywordFamily(
        name="beverage",
        keywords=("teh", "kopi", "susu", "jus", "air", "minuman"),
        category_synonyms=("minuman", "beverage"),
    ),
    KeywordFamily(
        name="household",
        keywords=("rins", "detergen", "sabun", "shampo", "pasta gigi", "tissue"),
        category_synonyms=("rumah tangga", "household"),
    ),
)

FALLBACK_DESCRIPTION = "Pembelian di Toko"
FALLBACK_KEYWORD = "pembelian"

ITEM_BOUNDS = (1_000, 1_000_000)
FALLBACK_BOUNDS = (1_000, 10_000_000)

# Structured and bare lines score the same 0.85 so both clear the same review
# threshold; a [confidence] table in receipt_rules.toml can rank them apart.
STRUCTURED_CONFIDENCE = 0.85
BARE_CONFIDENCE = 0.85
FALLBACK_CONFIDENCE = 0.7


@dataclass(frozen=True)
class ReceiptKeywordRules:
    """Immutable configuration for rule-based receipt parsing."""

    denylist: tuple[str, ...] = DENYLIST
    families: tuple[KeywordFamily, ...] = FAMILIES
    fallback_description: str = FALLBACK_DESCRIPTION
    fallback_keyword: str = FALLBACK_KEYWORD
    currency_markers: tuple[str, ...] = DEFAULT_CURRENCY_MARKERS
    amount_format: AmountFormat = AmountFormat()
    item_bounds: tuple[int, int] = ITEM_BOUNDS
    fallback_bounds: tuple[int, int] = FALLBACK_BOUNDS
    structured_confidence: float = STRUCTURED_CONFIDENCE
    bare_confidence: float = BARE_CONFIDENCE
    fallback_confidence: float = FALLBACK_CONFIDENCE


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize a TOML keyword value into a tuple of lowercase strings."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip().lower() for v in raw if str(v).strip())
    return tuple()


def _merge_unique(existing: Sequence[str], extra: Sequence[str]) -> tuple[str, ...]:
    merged = list(existing)
    for value in extra:
        if value not in merged:
            merged.append(value)
    return tuple(merged)


def _bounds(raw: Mapping[str, Any], low_key: str, high_key: str, current: tuple[int, int]) -> tuple[int, int]:
    low = int(raw.get(low_key, current[0]))
    high = int(raw.get(high_key, current[1]))
    if low > high:
        raise ValueError(f"Invalid bounds {low_key}={low} > {high_key}={high}")
    return (low, high)


def _merge_families(families: list[KeywordFamily], raw_families: Any) -> list[KeywordFamily]:
    if not isinstance(raw_families, list):
        return families
    by_name = {family.name: idx for idx, family in enumerate(families)}
    for entry in raw_families:
        if not isinstance(entry, Mapping):
            continue
        name = str(entry.get("name") or "").strip()
        keywords = _normalize_keywords(entry.get("keywords"))
        synonyms = _normalize_keywords(entry.get("category_synonyms"))
        if not name or not (keywords or synonyms):
            continue
        if name in by_name:
            current = families[by_name[name]]
            families[by_name[name]] = KeywordFamily(
                name=name,
                keywords=_merge_unique(current.keywords, keywords),
                category_synonyms=_merge_unique(current.category_synonyms, synonyms),
            )
        else:
            by_name[name] = len(families)
            families.append(KeywordFamily(name=name, keywords=keywords, category_synonyms=synonyms))
    return families


def build_receipt_keyword_rules(configs: Sequence[Mapping[str, Any]] | None = None) -> ReceiptKeywordRules:
    """Merge in-memory TOML layers on top of the built-in tables."""
    rules = ReceiptKeywordRules()
    denylist = list(rules.denylist)
    families = list(rules.families)
    settings: dict[str, Any] = {}

    for config in configs or ():
        denylist = list(_merge_unique(denylist, _normalize_keywords(config.get("denylist"))))
        families = _merge_families(families, config.get("families"))

        fallback = config.get("fallback", {})
        if isinstance(fallback, Mapping):
            if str(fallback.get("description", "")).strip():
                settings["fallback_description"] = str(fallback["description"]).strip()
            if str(fallback.get("keyword", "")).strip():
                settings["fallback_keyword"] = str(fallback["keyword"]).strip()

        markers = config.get("currency_markers")
        if isinstance(markers, list):
            settings["currency_markers"] = tuple(str(m).strip() for m in markers if str(m).strip())

        amounts = config.get("amounts", {})
        if isinstance(amounts, Mapping) and amounts:
            current_format = settings.get("amount_format", rules.amount_format)
            settings["amount_format"] = AmountFormat(
                thousands_separators=str(amounts.get("thousands_separators", current_format.thousands_separators)),
                decimal_separator=amounts.get("decimal_separator", current_format.decimal_separator) or None,
                minor_digits=int(amounts.get("minor_digits", current_format.minor_digits)),
            )
            settings["item_bounds"] = _bounds(
                amounts, "item_min", "item_max", settings.get("item_bounds", rules.item_bounds)
            )
            settings["fallback_bounds"] = _bounds(
                amounts, "fallback_min", "fallback_max", settings.get("fallback_bounds", rules.fallback_bounds)
            )

        confidence = config.get("confidence", {})
        if isinstance(confidence, Mapping):
            for key in ("structured", "bare", "fallback"):
                if key in confidence:
                    settings[f"{key}_confidence"] = float(confidence[key])

    return ReceiptKeywordRules(denylist=tuple(denylist), families=tuple(families), **settings)


@lru_cache(maxsize=1)
def get_default_receipt_rules() -> ReceiptKeywordRules:
    """Built-in-only rules (no file I/O, no runtime deps)."""
    return build_receipt_keyword_rules()
