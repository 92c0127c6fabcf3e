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

"""Ephemeris buffering and selection

``EphemerisStore`` keeps the broadcast navigation frames that may be needed
around the current processing time. It is filled lazily from an ordered
source (typically a RINEX navigation file decoded by cssrlib) and trimmed
as processing moves forward, so memory stays bounded for arbitrarily long
navigation streams.
"""

import logging
import math
import numbers
from typing import Iterable, Iterator, Optional

from ..core.constants import SYS_NONE, SYS_SBS, sat2sys
from ..core.data_structures import NavigationModel
from ..core.satellite import sat2id

logger = logging.getLogger(__name__)


class EphemerisStore:
    """Time-ordered buffer of navigation models

    Parameters
    ----------
    source : Iterable[NavigationModel]
        Navigation models ordered by non-decreasing ``toe``. Consumed on
        demand by :meth:`advance`, never re-read.

    Notes
    -----
    Advancement pulls models until the source is exhausted or until a pulled
    model lies beyond ``now`` without being usable yet (``toe > now`` and
    invalid at ``now``). That look-ahead model is kept. Retirement then drops
    every model whose ``toe`` is before the retirement bound and that is no
    longer valid at it. The bound is ``now`` unless an earlier epoch still
    has to be served, in which case the caller passes ``retire_before``.

    After ``advance(now)`` every source model with ``toe <= now`` has been
    ingested, and no buffered model is both older than ``now`` and invalid.
    """

    def __init__(self, source: Iterable[NavigationModel]):
        self._source: Iterator[NavigationModel] = iter(source)
        self._models: list[NavigationModel] = []
        self._lookahead: Optional[NavigationModel] = None
        self._exhausted = False
        logger.info("ephemeris buffer created & deployed")

    def __len__(self):
        return len(self._models)

    def __iter__(self):
        return iter(self._models)

    @property
    def is_exhausted(self) -> bool:
        """True once the source has been fully consumed"""
        return self._exhausted

    def satellites(self) -> list[int]:
        """Satellites with at least one buffered model"""
        return sorted({model.sat for model in self._models})

    def advance(self, now: float, retire_before: Optional[float] = None):
        """Bring the buffer to ``now`` (GPST seconds)

        Calling it again with the same ``now`` changes nothing. ``now`` is
        expected to be non-decreasing between calls.

        Parameters
        ----------
        now : float
            Ingestion horizon
        retire_before : float, optional
            Retirement bound when it differs from ``now``, typically the
            epoch still pending resolution. Models valid at that epoch stay
            buffered.
        """
        if not self._exhausted and not self._holds_lookahead(now):
            self._pull(now)
        self._retire(now if retire_before is None else min(retire_before, now))

    def select(self, now: float, sat: int) -> Optional[NavigationModel]:
        """Best model for ``sat`` at ``now``

        Among buffered models of ``sat`` valid at ``now``, the one with the
        smallest ``|now - toe|``. On ties the model ingested first wins.

        Returns
        -------
        NavigationModel or None
            None when no model qualifies, or for SBAS satellites which
            broadcast no Keplerian ephemeris.
        """
        if sat2sys(sat) == SYS_SBS:
            logger.error(f"{now:.3f}({sat2id(sat)}) - SBAS ephemeris is not supported")
            return None

        best = None
        best_dt = math.inf
        for model in self._models:
            if model.sat != sat or not model.is_valid(now):
                continue
            dt = abs(now - model.toe)
            if dt < best_dt:
                best, best_dt = model, dt

        if best is None:
            logger.debug(f"{now:.3f}({sat2id(sat)}) - no valid ephemeris in buffer")
        return best

    def _holds_lookahead(self, now: float) -> bool:
        held = self._lookahead
        return held is not None and held.toe > now and not held.is_valid(now)

    def _pull(self, now: float):
        for item in self._source:
            if not self._is_well_formed(item):
                continue

            self._models.append(item)
            logger.trace(f"{now:.3f} - ingested {item}")

            if item.toe > now and not item.is_valid(now):
                self._lookahead = item
                return

        self._exhausted = True
        self._lookahead = None
        logger.debug(f"{now:.3f} - navigation source exhausted ({len(self._models)} buffered)")

    def _retire(self, now: float):
        kept = [m for m in self._models if m.toe >= now or m.is_valid(now)]
        retired = len(self._models) - len(kept)
        if retired:
            self._models = kept
            logger.debug(f"{now:.3f} - retired {retired} outdated ephemeris frame(s)")

    @staticmethod
    def _is_well_formed(item) -> bool:
        if not isinstance(item, NavigationModel):
            logger.error(f"ephemeris source yielded {type(item).__name__}, skipped")
            return False
        if sat2sys(item.sat) == SYS_NONE:
            logger.error(f"navigation frame for unknown satellite #{item.sat}, skipped")
            return False
        if not _is_epoch(item.toe) or not _is_epoch(item.toc):
            logger.error(f"{sat2id(item.sat)} - navigation frame without valid toe/toc, skipped")
            return False
        return True


def _is_epoch(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)
