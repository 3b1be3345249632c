r"""Retry-After header parsing utilities.

This module provides a parser that converts the value of an HTTP
``Retry-After`` header into the duration to wait before retrying.
Parsing is based on a superset of RFC 9110 (section 10.2.3): anything
permitted by the RFC parses, and some common variations are accepted
too, such as fractional seconds, a missing day name, single-digit
days and hours, optional seconds and ISO-8601 instants.

A parser is an ordered chain of ``HeaderFormat`` objects. Each format
rejects the header cheaply with a guard pattern before attempting the
conversion, and the first format that accepts the header wins. Dates
are converted to a duration relative to a clock, which defaults to the
system clock and can be replaced for deterministic testing.
"""

from __future__ import annotations

__all__ = [
    "DECIMAL_SECONDS",
    "STRICT_SECONDS",
    "Clock",
    "HeaderFormat",
    "RetryAfterParser",
    "asctime_date",
    "imf_fixdate",
    "iso8601_date",
    "parse_asctime",
    "parse_imf_fixdate",
    "parse_iso8601",
    "parse_retry_after",
    "parse_rfc850_date",
    "rfc850_date",
    "system_clock",
    "wait_until",
]

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from retryheed.config import RETRY_AFTER_HEADER

if TYPE_CHECKING:
    import httpx

# Source of the current time, returning an aware datetime or a naive UTC one
Clock = Callable[[], datetime]

logger: logging.Logger = logging.getLogger(__name__)

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
        start=1,
    )
}
_SHORT_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_LONG_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Zone abbreviations accepted in RFC-850 dates, as fixed offsets in hours
_ZONES = {
    "GMT": 0,
    "UT": 0,
    "UTC": 0,
    "Z": 0,
    "WET": 0,
    "WEST": 1,
    "BST": 1,
    "CET": 1,
    "CEST": 2,
    "EET": 2,
    "EEST": 3,
    "JST": 9,
    "EST": -5,
    "EDT": -4,
    "CST": -6,
    "CDT": -5,
    "MST": -7,
    "MDT": -6,
    "PST": -8,
    "PDT": -7,
}

# Example: "Thu, 02 Jan 2003 01:23:45 GMT"
_IMF_FIXDATE = re.compile(
    r"^(?:(?P<weekday>\w{3}),\s)?(?P<day>\d{1,2})\s(?P<month>\w{3})\s(?P<year>\d{4})"
    r"\s(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?\sGMT$",
    re.ASCII,
)
# Example: "Thursday, 02-Jan-03 01:23:45 GMT"
_RFC_850 = re.compile(
    r"^(?:(?P<weekday>\w+),\s)?(?P<day>\d{1,2})-(?P<month>\w{3})-(?P<year>\d{2})"
    r"\s(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?\s(?P<zone>\w+)$",
    re.ASCII,
)
# Example: "Thu Jan  2 01:23:45 2003"
_ASCTIME = re.compile(
    r"^(?:(?P<weekday>\w{3})\s+)?(?P<month>\w{3})\s+(?P<day>\d+)"
    r"\s(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?\s+(?P<year>\d{4})$",
    re.ASCII,
)
# Example: "2003-01-02T01:23:45.123Z"
_ISO_8601 = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>(?:\d{3}){1,3}))?Z$",
    re.ASCII,
)


def system_clock() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HeaderFormat:
    """A single ``Retry-After`` format guarded by a fast-reject pattern.

    The converter is only called when the guard pattern matches the
    header. A converter that raises ``ValueError``, ``KeyError`` or
    ``OverflowError`` signals that the header looked like this format
    but is structurally invalid, e.g. an unknown month or an hour of
    99. This is treated as a non-match, not an error.

    Args:
        name: A human-readable name used in log messages.
        guard: The compiled pattern the trimmed header must match.
        convert: The function converting the matched header into a
            wait duration.

    Example:
        ```pycon
        >>> from retryheed.retry_after import STRICT_SECONDS
        >>> STRICT_SECONDS("120")
        datetime.timedelta(seconds=120)
        >>> STRICT_SECONDS("1.5") is None
        True

        ```
    """

    name: str
    guard: re.Pattern[str]
    convert: Callable[[str], timedelta]

    def __call__(self, header: str) -> timedelta | None:
        if self.guard.fullmatch(header) is None:
            return None
        try:
            return self.convert(header)
        except (ValueError, KeyError, OverflowError) as exc:
            logger.warning(f"Failed to parse Retry-After header {header!r} as {self.name}: {exc!r}")
            return None


def _seconds(header: str) -> timedelta:
    return timedelta(seconds=int(header))


def _decimal_seconds(header: str) -> timedelta:
    try:
        millis = int(Decimal(header).scaleb(3))
    except InvalidOperation as exc:
        raise ValueError(str(exc)) from exc
    return timedelta(milliseconds=millis)


STRICT_SECONDS = HeaderFormat(
    name="delay-seconds",
    guard=re.compile(r"^\d+$", re.ASCII),
    convert=_seconds,
)

DECIMAL_SECONDS = HeaderFormat(
    name="decimal-seconds",
    guard=re.compile(r"^\d+(\.\d*)?$", re.ASCII),
    convert=_decimal_seconds,
)


def _check_weekday(name: str | None, names: tuple[str, ...], instant: datetime) -> None:
    if name is None:
        return
    if name not in names:
        msg = f"unknown day name {name!r}"
        raise ValueError(msg)
    if names.index(name) != instant.weekday():
        msg = f"day name {name!r} does not match {instant.date().isoformat()}"
        raise ValueError(msg)


def _month(name: str) -> int:
    if name not in _MONTHS:
        msg = f"unknown month name {name!r}"
        raise ValueError(msg)
    return _MONTHS[name]


def _require(pattern: re.Pattern[str], text: str) -> re.Match[str]:
    match = pattern.fullmatch(text)
    if match is None:
        msg = f"{text!r} does not match {pattern.pattern!r}"
        raise ValueError(msg)
    return match


def _build(
    match: re.Match[str],
    *,
    month: int,
    year: int,
    tzinfo: timezone,
    weekdays: tuple[str, ...],
) -> datetime:
    instant = datetime(
        year,
        month,
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        int(match["second"] or 0),
        tzinfo=tzinfo,
    )
    _check_weekday(match["weekday"], weekdays, instant)
    return instant.astimezone(timezone.utc)


def parse_imf_fixdate(text: str) -> datetime:
    """Parse a superset of the IMF-fixdate format.

    Args:
        text: The date, e.g. ``"Thu, 02 Jan 2003 01:23:45 GMT"``. The day
            name and the seconds are optional, and the day and hour may
            have one or two digits.

    Returns:
        The parsed instant as an aware UTC datetime.

    Raises:
        ValueError: If the text is not a valid IMF-fixdate.

    Example:
        ```pycon
        >>> from retryheed.retry_after import parse_imf_fixdate
        >>> parse_imf_fixdate("Thu, 02 Jan 2003 01:23:45 GMT").isoformat()
        '2003-01-02T01:23:45+00:00'

        ```
    """
    match = _require(_IMF_FIXDATE, text)
    return _build(
        match,
        month=_month(match["month"]),
        year=int(match["year"]),
        tzinfo=timezone.utc,
        weekdays=_SHORT_WEEKDAYS,
    )


def parse_rfc850_date(text: str) -> datetime:
    """Parse a superset of the obsolete RFC-850 date format.

    The two-digit year is interpreted in the range 2000..2099, and the
    zone must be a known abbreviation such as ``GMT`` or ``EST``.

    Args:
        text: The date, e.g. ``"Thursday, 02-Jan-03 01:23:45 GMT"``.

    Returns:
        The parsed instant as an aware UTC datetime.

    Raises:
        ValueError: If the text is not a valid RFC-850 date.

    Example:
        ```pycon
        >>> from retryheed.retry_after import parse_rfc850_date
        >>> parse_rfc850_date("Wednesday, 01-Jan-03 20:23:45 EST").isoformat()
        '2003-01-02T01:23:45+00:00'

        ```
    """
    match = _require(_RFC_850, text)
    zone = match["zone"]
    if zone not in _ZONES:
        msg = f"unknown time zone {zone!r}"
        raise ValueError(msg)
    return _build(
        match,
        month=_month(match["month"]),
        year=2000 + int(match["year"]),
        tzinfo=timezone(timedelta(hours=_ZONES[zone]), zone),
        weekdays=_LONG_WEEKDAYS,
    )


def parse_asctime(text: str) -> datetime:
    """Parse a superset of the ANSI C ``asctime()`` format.

    The format carries no time zone and is interpreted as UTC.

    Args:
        text: The date, e.g. ``"Thu Jan  2 01:23:45 2003"``.

    Returns:
        The parsed instant as an aware UTC datetime.

    Raises:
        ValueError: If the text is not a valid asctime date.

    Example:
        ```pycon
        >>> from retryheed.retry_after import parse_asctime
        >>> parse_asctime("Thu Jan  2 01:23:45 2003").isoformat()
        '2003-01-02T01:23:45+00:00'

        ```
    """
    match = _require(_ASCTIME, text)
    return _build(
        match,
        month=_month(match["month"]),
        year=int(match["year"]),
        tzinfo=timezone.utc,
        weekdays=_SHORT_WEEKDAYS,
    )


def parse_iso8601(text: str) -> datetime:
    """Parse an ISO-8601 UTC instant.

    Zero, three, six or nine fractional digits are accepted. Digits
    beyond microsecond precision are truncated.

    Args:
        text: The instant, e.g. ``"2003-01-02T01:23:45.123Z"``.

    Returns:
        The parsed instant as an aware UTC datetime.

    Raises:
        ValueError: If the text is not a valid ISO-8601 UTC instant.

    Example:
        ```pycon
        >>> from retryheed.retry_after import parse_iso8601
        >>> parse_iso8601("2003-01-02T01:23:45.000000000Z").isoformat()
        '2003-01-02T01:23:45+00:00'

        ```
    """
    match = _require(_ISO_8601, text)
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    return datetime(
        int(match["year"]),
        int(match["month"]),
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        int(match["second"]),
        int(fraction),
        tzinfo=timezone.utc,
    )


def wait_until(
    parser: Callable[[str], datetime], clock: Clock | None = None
) -> Callable[[str], timedelta]:
    """Convert a date parser into a converter returning the wait until
    that date.

    Args:
        parser: The function parsing the header into an aware datetime.
        clock: The source of the current time. Defaults to the system
            clock. A naive datetime it returns is taken as UTC.

    Returns:
        A converter returning the duration between now and the parsed
        date, clamped to zero when the date is in the past.
    """
    now = clock or system_clock

    def convert(header: str) -> timedelta:
        current = now()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        difference = parser(header) - current
        return max(difference, timedelta(0))

    return convert


def imf_fixdate(clock: Clock | None = None) -> HeaderFormat:
    r"""Return the IMF-fixdate format, relative to ``clock``."""
    return HeaderFormat(
        name="IMF-fixdate", guard=_IMF_FIXDATE, convert=wait_until(parse_imf_fixdate, clock)
    )


def rfc850_date(clock: Clock | None = None) -> HeaderFormat:
    r"""Return the RFC-850 date format, relative to ``clock``."""
    return HeaderFormat(
        name="RFC-850", guard=_RFC_850, convert=wait_until(parse_rfc850_date, clock)
    )


def asctime_date(clock: Clock | None = None) -> HeaderFormat:
    r"""Return the asctime date format, relative to ``clock``."""
    return HeaderFormat(name="asctime", guard=_ASCTIME, convert=wait_until(parse_asctime, clock))


def iso8601_date(clock: Clock | None = None) -> HeaderFormat:
    r"""Return the ISO-8601 instant format, relative to ``clock``."""
    return HeaderFormat(name="ISO-8601", guard=_ISO_8601, convert=wait_until(parse_iso8601, clock))


class RetryAfterParser:
    """Parse ``Retry-After`` headers into wait durations.

    The header is trimmed and tried against each format in order, and
    the result of the first match is returned. A parser holds no mutable
    state, so one instance can be shared between threads.

    Use one of the presets rather than the constructor in most cases:

    - ``seconds_only()``: integer seconds only.
    - ``decimal_seconds()``: integer or decimal seconds.
    - ``strict()``: integer seconds and the three HTTP-date formats.
    - ``extended()``: everything in ``strict()`` plus decimal seconds
      and ISO-8601 instants.

    Args:
        *formats: The header formats to try, in order.

    Raises:
        ValueError: If no format is given.

    Example:
        ```pycon
        >>> from retryheed.retry_after import RetryAfterParser
        >>> parser = RetryAfterParser.extended()
        >>> parser.parse("1.5")
        datetime.timedelta(seconds=1, microseconds=500000)
        >>> parser.parse("garbage") is None
        True
        >>> RetryAfterParser.strict().parse("1.5") is None
        True

        ```
    """

    def __init__(self, *formats: HeaderFormat) -> None:
        if not formats:
            msg = "at least one header format is required"
            raise ValueError(msg)
        self._formats = formats

    def __repr__(self) -> str:
        names = ", ".join(header_format.name for header_format in self._formats)
        return f"{self.__class__.__qualname__}({names})"

    @property
    def formats(self) -> tuple[HeaderFormat, ...]:
        """The header formats tried by this parser, in order."""
        return self._formats

    @classmethod
    def seconds_only(cls) -> RetryAfterParser:
        """Return a parser accepting only an integer number of
        seconds."""
        return cls(STRICT_SECONDS)

    @classmethod
    def decimal_seconds(cls) -> RetryAfterParser:
        """Return a parser accepting an integer or decimal number of
        seconds."""
        # STRICT_SECONDS first, because the decimal conversion is more expensive
        return cls(STRICT_SECONDS, DECIMAL_SECONDS)

    @classmethod
    def strict(cls, clock: Clock | None = None) -> RetryAfterParser:
        """Return a parser for a reasonably strict reading of RFC 9110.

        Args:
            clock: The source of the current time used to convert dates
                into durations. Defaults to the system clock.
        """
        return cls.from_flags(clock=clock)

    @classmethod
    def extended(cls, clock: Clock | None = None) -> RetryAfterParser:
        """Return a parser for a superset of RFC 9110 that also accepts
        decimal seconds and ISO-8601 instants.

        Args:
            clock: The source of the current time used to convert dates
                into durations. Defaults to the system clock.
        """
        return cls.from_flags(decimal_seconds=True, iso8601=True, clock=clock)

    @classmethod
    def from_flags(
        cls,
        *,
        decimal_seconds: bool = False,
        http_dates: bool = True,
        iso8601: bool = False,
        clock: Clock | None = None,
    ) -> RetryAfterParser:
        """Return a parser with independently selected formats.

        Integer seconds are always accepted.

        Args:
            decimal_seconds: Whether to accept decimal seconds.
            http_dates: Whether to accept the IMF-fixdate, RFC-850 and
                asctime date formats.
            iso8601: Whether to accept ISO-8601 instants.
            clock: The source of the current time used to convert dates
                into durations. Defaults to the system clock.

        Example:
            ```pycon
            >>> from retryheed.retry_after import RetryAfterParser
            >>> parser = RetryAfterParser.from_flags(decimal_seconds=True)
            >>> parser
            RetryAfterParser(delay-seconds, decimal-seconds, IMF-fixdate, RFC-850, asctime)

            ```
        """
        formats = [STRICT_SECONDS]
        if decimal_seconds:
            formats.append(DECIMAL_SECONDS)
        if http_dates:
            formats.extend([imf_fixdate(clock), rfc850_date(clock), asctime_date(clock)])
        if iso8601:
            formats.append(iso8601_date(clock))
        return cls(*formats)

    def parse(self, header: str | None) -> timedelta | None:
        """Parse a raw ``Retry-After`` header value.

        Args:
            header: The header value, or ``None`` if the header is absent.

        Returns:
            The duration to wait, or ``None`` if the header is absent,
            empty or not recognized by any format. Dates in the past
            give a zero duration.
        """
        if header is None:
            logger.debug("No Retry-After header present")
            return None

        text = header.strip()
        if not text:
            logger.warning(f"Received empty Retry-After header {header!r}")
            return None

        # Return the result of the first successful parse
        for header_format in self._formats:
            wait = header_format(text)
            if wait is not None:
                logger.debug(
                    f"Parsed Retry-After header {header!r} as {header_format.name}: {wait}"
                )
                return wait

        logger.warning(f"Received unrecognized Retry-After header {header!r}")
        return None

    def parse_response(self, response: httpx.Response | Any | None) -> timedelta | None:
        """Parse the ``Retry-After`` header of an HTTP response.

        Args:
            response: The HTTP response, or any object with a ``headers``
                mapping. ``None`` is treated as an absent header.

        Returns:
            The duration to wait, or ``None`` if no usable header is
            present.
        """
        if response is None or not hasattr(response, "headers"):
            return None
        header = response.headers.get(RETRY_AFTER_HEADER)
        if header is not None and not isinstance(header, str):
            return None
        return self.parse(header)

    def __call__(self, response: httpx.Response | Any | None) -> timedelta | None:
        return self.parse_response(response)


_DEFAULT_PARSER = RetryAfterParser.extended()


def parse_retry_after(
    header: str | None, clock: Clock | None = None
) -> timedelta | None:
    """Parse a ``Retry-After`` header value with the extended parser.

    Args:
        header: The header value, or ``None`` if the header is absent.
        clock: The source of the current time used to convert dates
            into durations. Defaults to the system clock.

    Returns:
        The duration to wait, or ``None`` if the header is absent or
        cannot be parsed.

    Example:
        ```pycon
        >>> from retryheed.retry_after import parse_retry_after
        >>> parse_retry_after("120")
        datetime.timedelta(seconds=120)
        >>> parse_retry_after("0.5")
        datetime.timedelta(microseconds=500000)
        >>> parse_retry_after(None) is None
        True

        ```
    """
    parser = _DEFAULT_PARSER if clock is None else RetryAfterParser.extended(clock)
    return parser.parse(header)
