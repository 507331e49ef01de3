from datetime import datetime, timezone
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser


class DateUtils:
    """
    Timezone handling for timestamps shown to customers and admins

    Storage is always UTC. The storefront renders times in the store's local
    timezone and the admin order filter accepts loosely formatted dates.
    """

    UTC = timezone.utc

    @classmethod
    def now_utc(cls) -> datetime:
        return datetime.now(cls.UTC)

    @classmethod
    def ensure_utc(cls, dt: datetime) -> datetime:
        """Treat naive datetimes as UTC (SQLite returns them naive)"""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=cls.UTC)
        return dt.astimezone(cls.UTC)

    @classmethod
    def to_store_time(cls, dt: Optional[datetime], timezone_name: str) -> Optional[datetime]:
        if dt is None:
            return None
        return cls.ensure_utc(dt).astimezone(pytz.timezone(timezone_name))

    @classmethod
    def parse_date(
        cls,
        value: Union[str, datetime],
        timezone_name: str = 'UTC'
    ) -> datetime:
        """
        Parse a user-supplied date into an aware UTC datetime

        Naive inputs are interpreted in timezone_name, so "2025-03-01" from an
        admin in Kampala means midnight Kampala time.

        Raises:
            ValueError: if the value cannot be parsed
        """
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = date_parser.parse(value)
            except (date_parser.ParserError, OverflowError) as exc:
                raise ValueError(f"Unrecognized date: {value!r}") from exc

        if parsed.tzinfo is None:
            parsed = pytz.timezone(timezone_name).localize(parsed)
        return parsed.astimezone(cls.UTC)
