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

"""Per-epoch grouping of signal samples into candidates"""

from ..core.data_structures import BandObservation, Candidate, Carrier, ObservableKind


class CandidateAccumulator:
    """Observations of one epoch, keyed by satellite then carrier

    Satellites and carriers keep their order of first appearance, so the
    candidates built from the same stream are always listed the same way.
    """

    def __init__(self):
        self._bands: dict[int, dict[Carrier, BandObservation]] = {}

    def __len__(self):
        return len(self._bands)

    def __contains__(self, sat):
        return sat in self._bands

    @property
    def satellites(self) -> list[int]:
        return list(self._bands)

    def add(self, sat: int, carrier: Carrier, kind: ObservableKind, value: float):
        """Merge one sample into the (sat, carrier) record, creating it if needed"""
        bands = self._bands.setdefault(sat, {})
        band = bands.get(carrier)
        if band is None:
            band = bands[carrier] = BandObservation(carrier)
        band.update(kind, value)

    def candidates(self, time: float) -> list[Candidate]:
        """One candidate per accumulated satellite, stamped ``time``"""
        return [Candidate(sat, time, list(bands.values()))
                for sat, bands in self._bands.items()]

    def clear(self):
        self._bands.clear()
