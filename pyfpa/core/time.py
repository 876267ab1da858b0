# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""GPS time as transmitted by FP_A messages.

FP_A encodes time as a (GPS week, time of week) pair. ``GpsTime`` keeps both
values exactly as decoded; conversion helpers produce GPS seconds, Unix
seconds and UTC datetimes.

Time reference frames:
- GPS time: seconds since 1980-01-06 00:00:00 (no leap seconds)
- Unix time: seconds since 1970-01-01 00:00:00 UTC
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .constants import GPST0, WEEK_SECONDS

GPS_EPOCH_0 = datetime(*GPST0, tzinfo=timezone.utc)
UNIX_EPOCH_0 = datetime(1970, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

# Leap seconds table (most recent first)
# GPS time is ahead of UTC by these leap seconds
LEAPSECONDS_TABLE = [
    datetime(2017, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 18 seconds
    datetime(2015, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 17 seconds
    datetime(2012, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 16 seconds
    datetime(2009, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 15 seconds
    datetime(2006, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 14 seconds
    datetime(1999, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 13 seconds
    datetime(1997, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 12 seconds
    datetime(1996, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 11 seconds
    datetime(1994, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 10 seconds
    datetime(1993, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 9 seconds
    datetime(1992, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 8 seconds
    datetime(1991, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 7 seconds
    datetime(1990, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 6 seconds
    datetime(1988, 1, 1, 0, 0, 0, tzinfo=timezone.utc),  # 5 seconds
    datetime(1985, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 4 seconds
    datetime(1983, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 3 seconds
    datetime(1982, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 2 seconds
    datetime(1981, 7, 1, 0, 0, 0, tzinfo=timezone.utc),  # 1 second
    GPS_EPOCH_0  # 0 seconds
]


def get_leap_seconds(time_utc: datetime) -> int:
    """Get GPS-UTC leap seconds at given UTC time.

    Parameters
    ----------
    time_utc : datetime.datetime
        UTC time (naive datetimes are taken as UTC)

    Returns
    -------
    int
        Number of leap seconds to add to UTC to get GPS time
    """
    if time_utc.tzinfo is None:
        time_utc = time_utc.replace(tzinfo=timezone.utc)

    for i, leap_time in enumerate(LEAPSECONDS_TABLE):
        if time_utc >= leap_time:
            return len(LEAPSECONDS_TABLE) - 1 - i
    return 0


@dataclass(frozen=True)
class GpsTime:
    """GPS week and time of week, stored exactly as received

    The default value (week 0, tow 0.0) is the "invalid/unknown" sentinel the
    sensor reports before it has a time fix.
    """
    week: int = 0
    tow: float = 0.0

    @classmethod
    def invalid(cls) -> 'GpsTime':
        """Canonical invalid/unknown time"""
        return cls(0, 0.0)

    @classmethod
    def from_gps_seconds(cls, gps_seconds: float) -> 'GpsTime':
        """Create GpsTime from seconds since GPS epoch"""
        week = int(gps_seconds // WEEK_SECONDS)
        return cls(week, gps_seconds - week * WEEK_SECONDS)

    @property
    def is_valid(self) -> bool:
        return self.week != 0 or self.tow != 0.0

    def normalized(self) -> 'GpsTime':
        """Return the same instant with tow folded into [0, 604800)"""
        return GpsTime.from_gps_seconds(self.to_gps_seconds())

    def to_gps_seconds(self) -> float:
        """Convert to GPS seconds since GPS epoch"""
        return self.week * WEEK_SECONDS + self.tow

    def to_datetime(self) -> datetime:
        """Convert to a UTC datetime, removing GPS-UTC leap seconds"""
        dt_gps = GPS_EPOCH_0 + timedelta(seconds=self.to_gps_seconds())
        # Leap table is indexed by UTC, so look up twice around the boundary
        leap = get_leap_seconds(dt_gps)
        leap = get_leap_seconds(dt_gps - timedelta(seconds=leap))
        return dt_gps - timedelta(seconds=leap)

    def to_unix_seconds(self) -> float:
        """Convert to Unix seconds (UTC)"""
        return (self.to_datetime() - UNIX_EPOCH_0).total_seconds()

    def __lt__(self, other: 'GpsTime') -> bool:
        if not isinstance(other, GpsTime):
            return NotImplemented
        return self.to_gps_seconds() < other.to_gps_seconds()

    def __le__(self, other: 'GpsTime') -> bool:
        if not isinstance(other, GpsTime):
            return NotImplemented
        return self.to_gps_seconds() <= other.to_gps_seconds()

    def __sub__(self, other: 'GpsTime') -> float:
        """Difference in seconds"""
        if not isinstance(other, GpsTime):
            return NotImplemented
        return (self.week - other.week) * WEEK_SECONDS + (self.tow - other.tow)

    def __str__(self):
        return f"GPS Week: {self.week}, TOW: {self.tow:.3f}"


__all__ = ['GpsTime', 'get_leap_seconds', 'GPS_EPOCH_0', 'UNIX_EPOCH_0', 'LEAPSECONDS_TABLE']
