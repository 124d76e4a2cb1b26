"""Pure business rules - Price parsing, domain resolution and price comparison"""

import re
from decimal import Decimal, InvalidOperation
from typing import Literal, Optional

import tldextract

from pricewatch.core.constants import CURRENCY_TOKENS, PRICE_LABELS
from pricewatch.domain.errors import PriceUnparsable

DecimalSeparator = Literal[",", "."]

# Bundled public suffix snapshot only: no network, no cache writes
_domain_extractor = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)

_LABEL_RE = re.compile(
    r"^(?:%s)\b\s*" % "|".join(re.escape(label) for label in PRICE_LABELS),
    re.IGNORECASE,
)
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")

_NUMBER_PATTERNS = {
    ",": re.compile(r"^(?:\d{1,3}(?:\.\d{3})+|\d+)(?:,\d+)?$"),
    ".": re.compile(r"^(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?$"),
}


def _to_decimal(text: str, raw: Optional[str]) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise PriceUnparsable(raw) from exc


def strip_price_decorations(raw: str) -> str:
    """Remove leading labels, currency symbols and whitespace."""
    text = raw.replace("\xa0", " ").strip()

    previous = None
    while text != previous:
        previous = text
        text = _LABEL_RE.sub("", text).strip()
        for token in CURRENCY_TOKENS:
            text = text.replace(token, "")
        text = text.strip()

    return re.sub(r"\s+", "", text)


def parse_price(raw: Optional[str], decimal_separator: DecimalSeparator = ",") -> Decimal:
    """Convert a displayed price into a Decimal.

    ``decimal_separator`` is the convention of the site the text came from:
    with ``","`` the text ``"2.300,99"`` is 2300.99, with ``"."`` the text
    ``"2,300.99"`` is 2300.99. Grouping must be well formed, anything else
    raises PriceUnparsable instead of guessing.
    """
    if raw is None:
        raise PriceUnparsable(raw)

    text = strip_price_decorations(raw)
    if not _NUMBER_PATTERNS[decimal_separator].match(text):
        raise PriceUnparsable(raw)

    thousands = "." if decimal_separator == "," else ","
    normalized = text.replace(thousands, "").replace(decimal_separator, ".")
    return _to_decimal(normalized, raw)


def parse_split_price(whole: Optional[str], fraction: Optional[str]) -> Decimal:
    """Join a price rendered as separate whole and fraction fields.

    The whole field may carry grouping and a trailing separator
    (``"1.234,"`` or ``"1,234."``); the fraction must be digits only.
    """
    if whole is None or fraction is None:
        raise PriceUnparsable(f"{whole!r}/{fraction!r}")

    whole_digits = re.sub(r"[.,\s]", "", strip_price_decorations(whole))
    fraction_digits = fraction.strip()

    if not whole_digits.isdigit() or not fraction_digits.isdigit():
        raise PriceUnparsable(f"{whole}{fraction}")

    return _to_decimal(f"{whole_digits}.{fraction_digits}", f"{whole}{fraction}")


def parse_clock_reading(raw: Optional[str]) -> Decimal:
    """Read a clock field as minutes.seconds, dropping the hour.

    ``12:34:56`` reads as 34.56 and ``12:34`` as 34.
    """
    match = _CLOCK_RE.search(raw or "")
    if not match:
        raise PriceUnparsable(raw)

    _hours, minutes, seconds = match.groups()
    text = f"{minutes}.{seconds}" if seconds else minutes
    return _to_decimal(text, raw)


def registrable_domain(url: Optional[str]) -> Optional[str]:
    """Domain name without subdomains or public suffix, e.g. 'amazon'."""
    if not url or not url.strip():
        return None

    parts = _domain_extractor(url.strip())
    if not parts.domain or not parts.suffix:
        return None
    return parts.domain.lower()


def is_price_drop(old_price: Decimal, new_price: Decimal) -> bool:
    return new_price < old_price


def price_difference(old_price: Decimal, new_price: Decimal) -> Decimal:
    return old_price - new_price
