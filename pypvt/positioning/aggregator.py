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

"""Epoch synchronization of the observation stream

The aggregator walks a time-ordered stream of signal samples, keeps the
shared components (ephemeris buffer, time corrections, base station) in step
with it, and submits one batch of candidates to the solver each time an
epoch is complete.
"""

import logging
from typing import Iterable, Optional, Protocol

from ..core.data_structures import Candidate, Carrier, PVTSolution, SignalObservation, UserParameters
from ..core.errors import SolverError, UnknownCarrierError
from ..core.satellite import sat2id
from ..core.time_corrections import TimeCorrectionService
from ..satellite.ephemeris import EphemerisStore
from .accumulator import CandidateAccumulator

logger = logging.getLogger(__name__)


class Solver(Protocol):
    """Positioning solver consuming candidate batches"""

    def resolve(self, time: float, user_params: UserParameters,
                candidates: list[Candidate]) -> PVTSolution:
        """Solve one epoch. Raises SolverError when no solution is possible."""
        ...


class ObservationAggregator:
    """Groups signal samples into per-epoch candidate batches

    Parameters
    ----------
    solver : Solver
        Receives one ``resolve`` call per completed epoch
    store : EphemerisStore
        Shared ephemeris buffer, advanced on every new sample time. Models
        still valid at the pending epoch are retired only once it is solved.
    user_params : UserParameters, optional
        Profile pair forwarded with every solver call
    time_service : TimeCorrectionService, optional
        Advanced alongside the ephemeris buffer
    base_station : BaseStationBuffer, optional
        RTK reference station, advanced alongside the ephemeris buffer

    Notes
    -----
    An epoch is complete when a sample with a later timestamp arrives, so
    the last epoch of a stream is only submitted through :meth:`flush`.
    Samples are expected in non-decreasing time order.
    """

    def __init__(self, solver: Solver, store: EphemerisStore,
                 user_params: Optional[UserParameters] = None,
                 time_service: Optional[TimeCorrectionService] = None,
                 base_station=None):
        self.solver = solver
        self.store = store
        self.user_params = user_params or UserParameters()
        self.time_service = time_service
        self.base_station = base_station

        self.solutions: dict[float, PVTSolution] = {}
        self.solver_calls = 0

        self._accumulator = CandidateAccumulator()
        self._previous: Optional[float] = None
        self._advanced: Optional[float] = None

    @property
    def pending_epoch(self) -> Optional[float]:
        """Timestamp of the epoch still being accumulated"""
        return self._previous if len(self._accumulator) else None

    def process(self, samples: Iterable[SignalObservation]) -> dict[float, PVTSolution]:
        """Consume a whole stream, returns the solutions gathered so far"""
        for sample in samples:
            self.process_sample(sample)
        return self.solutions

    def process_sample(self, sample: SignalObservation):
        time = sample.time
        if time != self._advanced:
            self._advance(time)

        try:
            carrier = Carrier.from_observable(sample.sat, sample.observable)
        except UnknownCarrierError as e:
            logger.error(f"{time:.3f}({sat2id(sample.sat)}/{sample.observable}) - unknown signal: {e}")
            return

        kind = sample.kind
        if kind is None:
            logger.error(f"{time:.3f}({sat2id(sample.sat)}/{sample.observable}) - unknown observable")
            return

        if self._previous is not None and time > self._previous:
            self._submit(self._previous)

        self._accumulator.add(sample.sat, carrier, kind, sample.value)
        self._previous = time

    def flush(self) -> Optional[PVTSolution]:
        """Submit the pending epoch, if any"""
        if self._previous is None or not len(self._accumulator):
            return None
        t = self._previous
        self._submit(t)
        return self.solutions.get(t)

    def _advance(self, time: float):
        # the pending epoch is solved after this, keep what it needs
        keep_from = self.pending_epoch
        if keep_from is None:
            keep_from = time

        self.store.advance(time, retire_before=keep_from)
        if self.time_service is not None:
            self.time_service.new_epoch(time, keep_from)
        if self.base_station is not None:
            self.base_station.new_epoch(time, keep_from)
        self._advanced = time

    def _submit(self, t: float):
        candidates = self._accumulator.candidates(t)
        self._accumulator.clear()

        self.solver_calls += 1
        try:
            pvt = self.solver.resolve(t, self.user_params, candidates)
        except SolverError as e:
            logger.warning(f"{t:.3f} : solver error \"{e}\"")
            return

        logger.info(f"{t:.3f} : new solution (type={pvt.type}) pos={pvt.rr} dt={pvt.dtr:.3e}s")
        self.solutions[t] = pvt
