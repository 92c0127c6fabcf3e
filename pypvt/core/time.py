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

"""GNSS Time Systems and Conversions"""

from datetime import datetime, timedelta
from typing import Union

from .constants import GLO_UTC_OFFSET, GPS_BDS_OFFSET, GPS_UTC_OFFSET, GPST0, WEEK_SECONDS

TIME_SYSTEMS = ('GPS', 'GAL', 'BDS', 'GLO', 'UTC')

# GPST - <system time>, in seconds. Every system counts weeks from the
# 1980-01-06 calendar origin on its own clock.
_GPST_MINUS_SYSTEM = {
    'GPS': 0.0,
    'GAL': 0.0,
    'BDS': GPS_BDS_OFFSET,
    'UTC': GPS_UTC_OFFSET,
    'GLO': GPS_UTC_OFFSET - GLO_UTC_OFFSET,
}


class GNSSTime:
    """GNSS Time representation and conversion with type safety

    This class ensures that time systems are not accidentally mixed.
    All arithmetic operations check for compatible time systems.
    """

    def __init__(self, week: int = 0, tow: float = 0.0, time_sys: str = 'GPS'):
        """
        Initialize GNSS time

        Parameters:
        -----------
        week : int
            Week number (counted from 1980-01-06)
        tow : float
            Time of week in seconds
        time_sys : str
            Time system ('GPS', 'GAL', 'BDS', 'GLO', 'UTC')
        """
        self.week = int(week)
        self.tow = float(tow)
        self.time_sys = time_sys.upper()

        if self.time_sys not in TIME_SYSTEMS:
            raise ValueError(f"Invalid time system: {time_sys}. Must be one of {list(TIME_SYSTEMS)}")

        # Normalize TOW to [0, 604800)
        while self.tow >= WEEK_SECONDS:
            self.week += 1
            self.tow -= WEEK_SECONDS
        while self.tow < 0:
            self.week -= 1
            self.tow += WEEK_SECONDS

    @classmethod
    def from_datetime(cls, dt, time_sys='GPS'):
        """Create GNSSTime from a calendar datetime expressed in time_sys"""
        delta = dt - datetime(*GPST0)
        weeks = delta.days // 7
        tow = (delta.days % 7) * 86400 + delta.seconds + delta.microseconds * 1e-6
        return cls(weeks, tow, time_sys)

    @classmethod
    def from_gps_seconds(cls, gps_seconds, time_sys='GPS'):
        """Create GNSSTime from seconds since the 1980-01-06 origin"""
        week = int(gps_seconds // WEEK_SECONDS)
        tow = gps_seconds - week * WEEK_SECONDS
        return cls(week, tow, time_sys)

    def to_datetime(self):
        """Convert to a calendar datetime in this time system"""
        return datetime(*GPST0) + timedelta(weeks=self.week, seconds=self.tow)

    def to_gps_seconds(self):
        """Seconds since the 1980-01-06 origin, in this time system"""
        return self.week * WEEK_SECONDS + self.tow

    def add_seconds(self, seconds: float) -> 'GNSSTime':
        """Add seconds to time"""
        return GNSSTime(self.week, self.tow + seconds, self.time_sys)

    def __add__(self, seconds: float) -> 'GNSSTime':
        if isinstance(seconds, (int, float)):
            return self.add_seconds(seconds)
        return NotImplemented

    def __sub__(self, other: Union['GNSSTime', float]) -> Union[float, 'GNSSTime']:
        """Subtract time or seconds"""
        if isinstance(other, GNSSTime):
            if self.time_sys != other.time_sys:
                raise ValueError(f"Cannot subtract times with different systems: {self.time_sys} and {other.time_sys}")
            return (self.week - other.week) * WEEK_SECONDS + (self.tow - other.tow)
        elif isinstance(other, (int, float)):
            return self.add_seconds(-other)
        return NotImplemented

    def _check_comparable(self, other: 'GNSSTime'):
        if self.time_sys != other.time_sys:
            raise ValueError(f"Cannot compare times with different systems: {self.time_sys} and {other.time_sys}")

    def __lt__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_comparable(other)
        return (self.week, self.tow) < (other.week, other.tow)

    def __le__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_comparable(other)
        return (self.week, self.tow) <= (other.week, other.tow)

    def __gt__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_comparable(other)
        return (self.week, self.tow) > (other.week, other.tow)

    def __ge__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_comparable(other)
        return (self.week, self.tow) >= (other.week, other.tow)

    def __eq__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return self.time_sys == other.time_sys and self.week == other.week and abs(self.tow - other.tow) < 1e-9

    def __hash__(self):
        # rounded to the equality tolerance
        return hash((self.time_sys, self.week, round(self.tow, 9)))

    def __str__(self):
        return f"{self.time_sys} Week: {self.week}, TOW: {self.tow:.3f}"

    def __repr__(self):
        return f"GNSSTime({self.week}, {self.tow}, '{self.time_sys}')"

    def convert_to(self, target_sys: str) -> 'GNSSTime':
        """Generic (non-precise) conversion to a different time system

        Uses fixed offsets: Galileo time is aligned with GPS time,
        BDT = GPST - 14 s, UTC = GPST - 18 s, GLONASS = UTC + 3 h.

        Parameters:
        -----------
        target_sys : str
            Target time system ('GPS', 'GAL', 'BDS', 'GLO', 'UTC')

        Returns:
        --------
        GNSSTime
            Time in target system
        """
        target_sys = target_sys.upper()
        if target_sys not in TIME_SYSTEMS:
            raise ValueError(f"Conversion to {target_sys} not implemented")

        if self.time_sys == target_sys:
            return self.copy()

        gps_seconds = self.to_gps_seconds() + _GPST_MINUS_SYSTEM[self.time_sys]
        return GNSSTime.from_gps_seconds(gps_seconds - _GPST_MINUS_SYSTEM[target_sys], target_sys)

    def copy(self) -> 'GNSSTime':
        """Create a copy of this time instance"""
        return GNSSTime(self.week, self.tow, self.time_sys)


def gps_seconds_to_week_tow(gps_seconds: float) -> tuple:
    """
    Convert GPS seconds to GPS week number and time of week

    Parameters:
    -----------
    gps_seconds : float
        GPS seconds since GPS epoch (Jan 6, 1980 00:00:00 UTC)

    Returns:
    --------
    tuple : (week, tow)
        GPS week number and time of week in seconds
    """
    if gps_seconds < 0:
        raise ValueError(f"GPS seconds cannot be negative: {gps_seconds}")

    week = int(gps_seconds // WEEK_SECONDS)
    tow = gps_seconds - week * WEEK_SECONDS

    return week, tow


def to_gnss_time(value: Union[GNSSTime, float], time_sys: str = 'GPS') -> GNSSTime:
    """Accept either a GNSSTime or plain GPST seconds"""
    if isinstance(value, GNSSTime):
        return value
    return GNSSTime.from_gps_seconds(float(value), time_sys)
