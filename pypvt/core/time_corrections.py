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

"""Precise time-scale corrections

Broadcast navigation messages and clock products publish the offset between
two time scales as a polynomial around a reference epoch (the GPS UTC
parameters A0, A1, tot, WNt for example). ``CorrectionDatabase`` collects
those polynomials and ``TimeCorrectionService`` consults it once per
processed epoch, falling back to the generic ``GNSSTime.convert_to`` when no
precise correction applies.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .constants import WEEK_SECONDS
from .time import GNSSTime, to_gnss_time

__all__ = ['TimeCorrection', 'CorrectionDatabase', 'TimeCorrectionService']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeCorrection:
    """Offset polynomial between two time scales.

    A reading ``t`` on the ``lhs`` clock reads ``t + a0 + a1 * (t - reference)``
    on the ``rhs`` clock. A GPST to UTC correction therefore carries
    ``a0`` close to -18 s.

    Attributes
    ----------
    lhs : str
        Source time scale ('GPS', 'GAL', 'BDS', 'GLO', 'UTC')
    rhs : str
        Target time scale
    reference : GNSSTime
        Reference epoch of the polynomial, in ``lhs``
    a0 : float
        Offset at the reference epoch (s)
    a1 : float
        Drift (s/s)
    """
    lhs: str
    rhs: str
    reference: GNSSTime
    a0: float
    a1: float = 0.0

    def offset(self, t: GNSSTime) -> float:
        """rhs reading minus lhs reading at ``t`` (s)"""
        return self.a0 + self.a1 * (t - self.reference)


class CorrectionDatabase:
    """Collection of time-scale corrections with a weekly validity window"""

    def __init__(self, corrections=None):
        self._corrections: list[TimeCorrection] = []
        for correction in corrections or []:
            self.add(correction)

    def __len__(self):
        return len(self._corrections)

    def __iter__(self):
        return iter(self._corrections)

    def add(self, correction: TimeCorrection):
        if correction.reference.time_sys != correction.lhs.upper():
            raise ValueError(
                f"correction reference must be expressed in {correction.lhs}, "
                f"got {correction.reference.time_sys}")
        self._corrections.append(correction)

    def outdate_weekly(self, now: GNSSTime):
        """Drop corrections published more than one week before ``now``"""
        before = len(self._corrections)
        self._corrections = [
            c for c in self._corrections
            if now.convert_to(c.lhs) - c.reference <= WEEK_SECONDS
        ]
        dropped = before - len(self._corrections)
        if dropped:
            logger.debug(f"{now} - {dropped} time correction(s) outdated")

    def precise_epoch_correction(self, t: GNSSTime, target: str) -> Optional[GNSSTime]:
        """Apply the most recent applicable correction from t's scale to target.

        Only corrections whose reference lies within one week of ``t`` are
        considered. Returns None when no correction applies.
        """
        target = target.upper()
        best = None
        for correction in self._corrections:
            if correction.lhs != t.time_sys or correction.rhs != target:
                continue
            if abs(t - correction.reference) > WEEK_SECONDS:
                continue
            if best is None or correction.reference > best.reference:
                best = correction

        if best is None:
            return None

        seconds = t.to_gps_seconds() + best.offset(t)
        return GNSSTime.from_gps_seconds(seconds, target)


class TimeCorrectionService:
    """Epoch conversions with optional precise corrections.

    The mode (with or without database) is fixed at construction;
    ``new_epoch`` only expires database entries.
    """

    def __init__(self, database: Optional[CorrectionDatabase] = None):
        self.database = database
        if database is None:
            logger.info("time corrections: coarse conversions only")
        else:
            logger.info(f"time corrections database created ({len(database)} entries)")

    @property
    def has_database(self) -> bool:
        return self.database is not None

    def new_epoch(self, now: Union[GNSSTime, float], keep_from: Optional[Union[GNSSTime, float]] = None):
        """Expire database entries, relative to ``keep_from`` when it is earlier"""
        if self.database is None:
            return
        now = to_gnss_time(now)
        if keep_from is not None:
            keep_from = to_gnss_time(keep_from)
            if keep_from.to_gps_seconds() < now.to_gps_seconds():
                now = keep_from
        self.database.outdate_weekly(now)

    def epoch_correction(self, t: Union[GNSSTime, float], target: str) -> GNSSTime:
        """Convert ``t`` to ``target``, precisely when possible"""
        t = to_gnss_time(t)
        if self.database is not None:
            corrected = self.database.precise_epoch_correction(t, target)
            if corrected is not None:
                return corrected
        return t.convert_to(target)
