"""
Currency support — the currencies a ledger can report in, and how to print them.

Every amount the aggregator emits travels with a CurrencyTag. Records that
carry no tag fall back to a configured default so the formatter below never
has to guess.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from bizledger.models.financial import CurrencyTag

logger = logging.getLogger("bizledger.analyzers.currency")


# Currencies offered in the app, in display order. The first one is the
# application-wide default.
SUPPORTED_CURRENCIES: list[CurrencyTag] = [
    CurrencyTag(code="NGN", symbol="₦", locale="en-NG", label="Nigeria (NGN)"),
    CurrencyTag(code="USD", symbol="$", locale="en-US", label="United States (USD)"),
    CurrencyTag(code="GBP", symbol="£", locale="en-GB", label="United Kingdom (GBP)"),
    CurrencyTag(code="EUR", symbol="€", locale="de-DE", label="Europe (EUR)"),
    CurrencyTag(code="GHS", symbol="GH₵", locale="en-GH", label="Ghana (GHS)"),
    CurrencyTag(code="CAD", symbol="CA$", locale="en-CA", label="Canada (CAD)"),
]

DEFAULT_CURRENCY: CurrencyTag = SUPPORTED_CURRENCIES[0]

# Minor-unit digits per currency code (ISO 4217). Unknown codes use 2.
CURRENCY_DECIMALS: dict[str, int] = {
    "NGN": 2,
    "USD": 2,
    "GBP": 2,
    "EUR": 2,
    "GHS": 2,
    "CAD": 2,
    "JPY": 0,
    "KRW": 0,
}


@dataclass(frozen=True)
class LocaleConvention:
    """Number layout for one locale."""

    group_separator: str = ","
    decimal_separator: str = "."
    symbol_first: bool = True
    symbol_spacing: str = ""


_DEFAULT_CONVENTION = LocaleConvention()

# Only locales that deviate from the English layout need an entry.
LOCALE_CONVENTIONS: dict[str, LocaleConvention] = {
    "de-DE": LocaleConvention(".", ",", symbol_first=False, symbol_spacing="\u00a0"),
    "fr-FR": LocaleConvention("\u202f", ",", symbol_first=False, symbol_spacing="\u00a0"),
    "fr-CA": LocaleConvention("\u00a0", ",", symbol_first=False, symbol_spacing="\u00a0"),
    "es-ES": LocaleConvention(".", ",", symbol_first=False, symbol_spacing="\u00a0"),
    "it-IT": LocaleConvention(".", ",", symbol_first=False, symbol_spacing="\u00a0"),
}


def get_currency(code: str) -> CurrencyTag | None:
    """Look up a supported currency by ISO code (case-insensitive)."""
    wanted = code.strip().upper()
    for tag in SUPPORTED_CURRENCIES:
        if tag.code == wanted:
            return tag
    return None


def currency_from_value(value: Any) -> CurrencyTag | None:
    """Build a CurrencyTag from a record field.

    Accepts an existing tag, an ISO code string, or a mapping with at least
    ``code`` (``symbol`` and ``locale`` are filled from the supported list
    when missing). Returns None for empty or unrecognised input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, CurrencyTag):
        return value
    if isinstance(value, str):
        return get_currency(value)
    if isinstance(value, dict):
        code = str(value.get("code") or "").upper()
        if not code:
            return None
        known = get_currency(code)
        symbol = value.get("symbol") or (known.symbol if known else code)
        locale = value.get("locale") or (known.locale if known else "en-US")
        label = value.get("label") or (known.label if known else None)
        return CurrencyTag(code=code, symbol=symbol, locale=locale, label=label)
    logger.debug("Ignoring unsupported currency value: %r", value)
    return None


def resolve_currency(
    currency: CurrencyTag | None,
    default: CurrencyTag | None = None,
) -> CurrencyTag:
    """Return ``currency`` or, failing that, the default tag. Never None."""
    if currency is not None:
        return currency
    return default if default is not None else DEFAULT_CURRENCY


def format_amount(value: float, decimals: int = 2, locale: str = "en-US") -> str:
    """Format an unsigned number with the grouping rules of ``locale``."""
    convention = LOCALE_CONVENTIONS.get(locale, _DEFAULT_CONVENTION)
    text = f"{abs(value):,.{decimals}f}"
    if convention.group_separator != "," or convention.decimal_separator != ".":
        text = (
            text.replace(",", "\x00")
            .replace(".", convention.decimal_separator)
            .replace("\x00", convention.group_separator)
        )
    return text


def format_currency(
    value: float | None,
    currency: CurrencyTag | None = None,
    *,
    default: CurrencyTag | None = None,
    include_code: bool = False,
) -> str:
    """Format an amount with its currency symbol.

    A missing ``value`` prints as zero and a missing ``currency`` falls back
    to ``default`` (then to the application default).

    Returns:
        Formatted string like "₦1,234.56", "-$20.00" or "1.234,56 €".
    """
    tag = resolve_currency(currency, default)
    amount = float(value or 0)
    decimals = CURRENCY_DECIMALS.get(tag.code, 2)
    convention = LOCALE_CONVENTIONS.get(tag.locale, _DEFAULT_CONVENTION)

    rounded = round(amount, decimals)
    number = format_amount(rounded, decimals, tag.locale)
    sign = "-" if rounded < 0 else ""

    if convention.symbol_first:
        formatted = f"{sign}{tag.symbol}{convention.symbol_spacing}{number}"
    else:
        formatted = f"{sign}{number}{convention.symbol_spacing}{tag.symbol}"

    if include_code:
        formatted += f" {tag.code}"
    return formatted
