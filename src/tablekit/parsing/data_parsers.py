"""Data parsers used to classify and order raw table cell values.

A `DataParser` bundles a classifier, a normalizer producing a comparable value
and a compare function. The `ParserRegistry` holds parsers in a fixed priority
order: the first parser whose classifier accepts a raw value is authoritative
for it, so specific formats come first and the catch-all ``text`` parser is
always last.

Built-in order:

    digit -> currency -> usLongDate -> shortDate -> time
          -> blackFontCurrency -> text

The registry is immutable. `default_registry` is built once at import time;
components accept a registry argument so tests and integrators can inject
custom parser sets (see `ParserRegistry.with_parsers`).
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

from tablekit.parsing.errors import (
    DuplicateParserError,
    MissingTerminalParserError,
    UnknownParserError,
)
from tablekit.utils.html_utils import strip_tags

__all__ = [
    "BUILTIN_PARSERS",
    "DataParser",
    "ParserKind",
    "ParserRegistry",
    "TEXT_PARSER_ID",
    "default_registry",
    "leading_float",
    "numeric_compare",
    "text_compare",
]

TEXT_PARSER_ID = "text"


class ParserKind(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"


@dataclass(frozen=True)
class DataParser:
    id: str
    classify: Callable[[str], bool]
    normalize: Callable[[str], Any]
    compare: Callable[[Any, Any], float]
    kind: ParserKind = ParserKind.TEXT


# ----------------------------------------------------------------------
# Compare functions
# ----------------------------------------------------------------------
def numeric_compare(a: Any, b: Any) -> float:
    return float(a) - float(b)


def text_compare(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


_FLOAT_RE = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)")


def leading_float(text: str) -> float:
    """Parse the longest numeric prefix of `text`; 0.0 when there is none."""
    m = _FLOAT_RE.match(text)
    return float(m.group(1)) if m else 0.0


# ----------------------------------------------------------------------
# digit / currency
# ----------------------------------------------------------------------
_CURRENCY_SYMBOLS = "£¥$€₹"
_DIGIT_RE = re.compile(r"[-+(]?\d+\)?")
_PAREN_NEGATIVE_RE = re.compile(r"^\((\d+(?:\.\d+)?)\)?")
_CURRENCY_RE = re.compile(r"^[-+]?\(?[" + _CURRENCY_SYMBOLS + r",.+\-]\(?[-+]?\d")
_CURRENCY_STRIP_RE = re.compile(r"[" + _CURRENCY_SYMBOLS + r",]")


def _signed_amount(text: str) -> float:
    text = text.strip()
    m = _PAREN_NEGATIVE_RE.match(text)
    if m:
        return -float(m.group(1))
    return leading_float(text)


def _is_digit(raw: str) -> bool:
    return _DIGIT_RE.fullmatch(re.sub(r"[,.']", "", raw).strip()) is not None


def _normalize_digit(raw: str) -> float:
    return _signed_amount(re.sub(r"[,']", "", raw))


def _is_currency(raw: str) -> bool:
    return _CURRENCY_RE.match(raw.strip()) is not None


def _normalize_currency(raw: str) -> float:
    return _signed_amount(_CURRENCY_STRIP_RE.sub("", raw))


# ----------------------------------------------------------------------
# Dates and times
# ----------------------------------------------------------------------
_US_LONG_DATE_RE = re.compile(
    r"^([A-Za-z]{3,10})[.,]? ([0-9]{1,2}), ([0-9]{4}), "
    r"([0-9]{1,2}):([0-5][0-9])(?::([0-5][0-9]))? "
    r"([aApP]\.?\s?[mM]\.?)$"
)
_SHORT_DATE_RE = re.compile(r"(\d{4})/(\d{1,2})/(\d{1,2})")
_TIME_RE = re.compile(
    r"^(?:([0-2]?[0-9]):([0-5][0-9])|([0-1]?[0-9]):([0-5][0-9]).*(am|pm))$",
    re.IGNORECASE,
)
_MONTHS = {calendar.month_name[i].lower(): i for i in range(1, 13)}
_REFERENCE_DATE = (2000, 1, 1)

DateParts = Tuple[int, int, int, int, int, int]


def _month_number(name: str) -> Optional[int]:
    name = name.lower()
    if name == "sept":
        return 9
    for full, number in _MONTHS.items():
        if full.startswith(name):
            return number
    return None


def _to_24h(hour: int, meridiem: str) -> int:
    meridiem = re.sub(r"[.\s]", "", meridiem).lower()
    if meridiem == "pm" and hour != 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


def _valid(parts: DateParts) -> Optional[DateParts]:
    try:
        datetime(*parts)
    except ValueError:
        return None
    return parts


def _epoch(parts: Optional[DateParts]) -> float:
    return float(calendar.timegm(parts)) if parts else 0.0


def _us_long_date_parts(raw: str) -> Optional[DateParts]:
    m = _US_LONG_DATE_RE.match(raw.strip())
    if not m:
        return None
    month = _month_number(m.group(1))
    hour = int(m.group(4))
    if month is None or not 1 <= hour <= 12:
        return None
    return _valid(
        (
            int(m.group(3)),
            month,
            int(m.group(2)),
            _to_24h(hour, m.group(7)),
            int(m.group(5)),
            int(m.group(6) or 0),
        )
    )


def _short_date_parts(raw: str) -> Optional[DateParts]:
    m = _SHORT_DATE_RE.search(raw.replace("-", "/"))
    if not m:
        return None
    return _valid((int(m.group(1)), int(m.group(2)), int(m.group(3)), 0, 0, 0))


def _time_parts(raw: str) -> Optional[DateParts]:
    m = _TIME_RE.match(raw.strip())
    if not m:
        return None
    if m.group(1) is not None:
        hour, minute = int(m.group(1)), int(m.group(2))
        if hour > 23:
            return None
    else:
        hour, minute = int(m.group(3)), int(m.group(4))
        if hour > 12:
            return None
        hour = _to_24h(hour, m.group(5))
    return _REFERENCE_DATE + (hour, minute, 0)


# ----------------------------------------------------------------------
# Inline markup
# ----------------------------------------------------------------------
_BLACK_FONT_RE = re.compile(r'<font color="black">(.*)</font>', re.IGNORECASE | re.DOTALL)
_BLACK_FONT_STRIP_RE = re.compile(r"[()" + _CURRENCY_SYMBOLS + r",\s]")


def _black_font_amount(raw: str) -> Optional[float]:
    m = _BLACK_FONT_RE.search(raw)
    if not m:
        return None
    inner = strip_tags(m.group(1))
    number = _BLACK_FONT_STRIP_RE.sub("", inner)
    if not _NUMBER_RE.fullmatch(number):
        return None
    value = float(number)
    return -abs(value) if "(" in inner else value


# ----------------------------------------------------------------------
# Built-in parser set
# ----------------------------------------------------------------------
def _numeric(parser_id: str, classify: Callable[[str], bool], normalize: Callable[[str], Any]):
    return DataParser(parser_id, classify, normalize, numeric_compare, ParserKind.NUMERIC)


BUILTIN_PARSERS: Tuple[DataParser, ...] = (
    _numeric("digit", _is_digit, _normalize_digit),
    _numeric("currency", _is_currency, _normalize_currency),
    _numeric(
        "usLongDate",
        lambda s: _us_long_date_parts(s) is not None,
        lambda s: _epoch(_us_long_date_parts(s)),
    ),
    _numeric(
        "shortDate",
        lambda s: _short_date_parts(s) is not None,
        lambda s: _epoch(_short_date_parts(s)),
    ),
    _numeric(
        "time",
        lambda s: _time_parts(s) is not None,
        lambda s: _epoch(_time_parts(s)),
    ),
    _numeric(
        "blackFontCurrency",
        lambda s: _black_font_amount(s) is not None,
        lambda s: _black_font_amount(s) or 0.0,
    ),
    DataParser(TEXT_PARSER_ID, lambda s: True, str.strip, text_compare, ParserKind.TEXT),
)


class ParserRegistry:
    """Immutable, ordered set of data parsers.

    The last parser must be the catch-all ``text`` parser; construction fails
    otherwise, which keeps `resolve` total.
    """

    def __init__(self, parsers: Iterable[DataParser] = BUILTIN_PARSERS) -> None:
        ordered = tuple(parsers)
        if not ordered or ordered[-1].id != TEXT_PARSER_ID:
            raise MissingTerminalParserError(
                "parser registry must end with the 'text' parser",
                context={"ids": [p.id for p in ordered]},
            )
        by_id: dict[str, DataParser] = {}
        for parser in ordered:
            if parser.id in by_id:
                raise DuplicateParserError(
                    f"parser id '{parser.id}' registered twice", context={"id": parser.id}
                )
            by_id[parser.id] = parser
        self._parsers = ordered
        self._by_id = by_id

    def resolve(self, raw: str | None) -> DataParser:
        """Return the first parser whose classifier accepts `raw`."""
        raw = raw or ""
        for parser in self._parsers:
            if parser.classify(raw):
                return parser
        # The terminal text parser matches everything; only a broken custom
        # terminal can get here.
        raise MissingTerminalParserError(
            "no parser matched", context={"raw": raw[:40]}
        )  # pragma: no cover

    def get(self, parser_id: str) -> DataParser:
        try:
            return self._by_id[parser_id]
        except KeyError:
            raise UnknownParserError(
                f"unknown parser '{parser_id}'", context={"known": self.ids()}
            ) from None

    def ids(self) -> list[str]:
        return [p.id for p in self._parsers]

    def with_parsers(self, *extra: DataParser) -> "ParserRegistry":
        """Return a new registry with `extra` inserted before the text parser."""
        return ParserRegistry(self._parsers[:-1] + tuple(extra) + self._parsers[-1:])

    def __iter__(self) -> Iterator[DataParser]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def __contains__(self, parser_id: object) -> bool:
        return parser_id in self._by_id


# Process-wide registry, constructed once at import
default_registry = ParserRegistry(BUILTIN_PARSERS)
