import datetime
import logging
import typing

from ..models import AttributeKind

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
"""
Date and time part of the wire date format; the offset follows as ``Z`` or ``±HH:MM``.
"""


class TZLocalizer(typing.Protocol):
    def localize(self, dt: datetime.datetime) -> datetime.datetime:
        ...  # pragma: nocover


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)


def _format_offset(offset: typing.Optional[datetime.timedelta]) -> str:
    assert offset is not None
    seconds = int(offset.total_seconds())
    if seconds % 60 != 0 or offset.microseconds:
        raise ValueError(f"UTC offset {offset} cannot be written in whole minutes")
    if seconds == 0:
        return "Z"
    sign = "+" if seconds > 0 else "-"
    hours, rest = divmod(abs(seconds), 3600)
    return f"{sign}{hours:02d}:{rest // 60:02d}"


class ValueFormatter:
    """
    Converts attribute values between their wire form and their native form,
    depending on the kind of attribute they belong to.

    Only ``Date`` attributes are transformed; any other value passes through.
    A wire date that cannot be parsed becomes :py:meth:`now` instead of failing.

    :param Callable[[], datetime] now: yields the fallback for unparsable dates.
        Defaults to the current UTC time.
    :param Optional[tzinfo] assume_naive_timezone_as: the timezone naive datetimes are
        taken to be in when formatting. Naive datetimes are rejected if omitted.
    """

    _now: typing.Callable[[], datetime.datetime]
    _assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None

    def now(self) -> datetime.datetime:
        return self._now()

    def format_date(self, value: typing.Any) -> typing.Optional[str]:
        if value is None:
            return None
        if not isinstance(value, datetime.datetime):
            raise ValueError(f"{value!r} is not a datetime")
        if value.tzinfo is None:
            if self._assume_naive_timezone_as is None:
                raise ValueError(f"naive datetime {value}")
            if hasattr(self._assume_naive_timezone_as, "localize"):
                value = typing.cast(TZLocalizer, self._assume_naive_timezone_as).localize(value)
            else:
                value = value.replace(tzinfo=self._assume_naive_timezone_as)
        return value.strftime(DATE_FORMAT) + _format_offset(value.utcoffset())

    def unformat_date(self, value: typing.Any) -> typing.Optional[datetime.datetime]:
        if value is None:
            return None
        if isinstance(value, str):
            try:
                return datetime.datetime.strptime(value, DATE_FORMAT + "%z")
            except ValueError:
                pass
        fallback = self.now()
        logger.debug("unparsable date %r, using %s instead", value, fallback)
        return fallback

    def format(self, kind: AttributeKind, value: typing.Any) -> typing.Any:
        if kind is AttributeKind.DATE:
            return self.format_date(value)
        return value

    def unformat(self, kind: AttributeKind, value: typing.Any) -> typing.Any:
        if kind is AttributeKind.DATE:
            return self.unformat_date(value)
        return value

    def __init__(
        self,
        now: typing.Optional[typing.Callable[[], datetime.datetime]] = None,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self._now = now if now is not None else utcnow
        self._assume_naive_timezone_as = assume_naive_timezone_as
