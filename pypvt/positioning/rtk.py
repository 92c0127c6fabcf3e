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

"""RTK reference (base) station fed from its own observation stream"""

import logging
from collections.abc import Mapping
from typing import Iterable, Iterator, Optional

import numpy as np

from ..core.data_structures import Candidate, Carrier, SignalObservation
from ..core.errors import ConfigurationError, UnknownCarrierError
from .accumulator import CandidateAccumulator

logger = logging.getLogger(__name__)

# Base and rover samples closer than this are the same epoch (s)
EPOCH_TOLERANCE = 1e-6


def _header_value(header, key):
    if header is None:
        return None
    if isinstance(header, Mapping):
        return header.get(key)
    return getattr(header, key, None)


class BaseStationBuffer:
    """Buffered base station observations

    Parameters
    ----------
    samples : Iterable[SignalObservation]
        Base station samples in non-decreasing time order
    reference_position_ecef_m : array_like
        Surveyed base station position (m), mandatory
    name : str
        Station name used in diagnostics

    Raises
    ------
    ConfigurationError
        If no reference position is given
    """

    def __init__(self, samples: Iterable[SignalObservation], reference_position_ecef_m, name: str = "Base"):
        if reference_position_ecef_m is None:
            raise ConfigurationError(f"{name} - reference station coordinates are mandatory")

        position = np.asarray(reference_position_ecef_m, dtype=float).reshape(-1)
        if position.shape != (3,) or not np.all(np.isfinite(position)):
            raise ConfigurationError(f"{name} - invalid reference position: {reference_position_ecef_m}")

        self._name = name
        self._position = position
        self._source: Iterator[SignalObservation] = iter(samples)
        self._buffer: list[SignalObservation] = []
        self._exhausted = False

        logger.info(f"{self._name} - rtk base station deployed")

    @classmethod
    def from_header(cls, header, samples: Iterable[SignalObservation], name: Optional[str] = None):
        """Build from observation header metadata

        ``header`` is a mapping or an object exposing ``rx_position`` or
        ``approx_position``, and optionally ``marker_name``.
        """
        position = _header_value(header, 'rx_position')
        if position is None:
            position = _header_value(header, 'approx_position')
        if position is None:
            raise ConfigurationError("base station coordinates must be described in the RINEX header")

        name = name or _header_value(header, 'marker_name') or "Base"
        return cls(samples, position, name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_exhausted(self) -> bool:
        return self._exhausted

    def __len__(self):
        return len(self._buffer)

    def reference_position_ecef_m(self, t: Optional[float] = None) -> np.ndarray:
        """Reference position (m), static over time"""
        return self._position.copy()

    def new_epoch(self, now: float, keep_from: Optional[float] = None):
        """Buffer samples through the epoch following ``now``

        Samples older than ``keep_from`` are dropped, ``now`` when not given.
        Passing the epoch still pending resolution keeps its samples
        observable while the stream moves on.
        """
        oldest = now if keep_from is None else min(keep_from, now)
        self._buffer = [s for s in self._buffer if s.time >= oldest - EPOCH_TOLERANCE]

        if self._buffer and self._buffer[-1].time > now + EPOCH_TOLERANCE:
            return

        while not self._exhausted:
            sample = next(self._source, None)
            if sample is None:
                self._exhausted = True
                logger.debug(f"{self._name} - end of observation stream")
                break
            if sample.time < oldest - EPOCH_TOLERANCE:
                continue
            self._buffer.append(sample)
            if sample.time > now + EPOCH_TOLERANCE:
                break

    def observe(self, t: float) -> list[Candidate]:
        """Candidates built from the buffered samples of epoch ``t``"""
        accumulator = CandidateAccumulator()
        for sample in self._buffer:
            if abs(sample.time - t) > EPOCH_TOLERANCE:
                continue
            kind = sample.kind
            if kind is None:
                continue
            try:
                carrier = Carrier.from_observable(sample.sat, sample.observable)
            except UnknownCarrierError:
                logger.debug(f"{self._name} - {sample.observable} skipped, unknown carrier")
                continue
            accumulator.add(sample.sat, carrier, kind, sample.value)
        return accumulator.candidates(t)
