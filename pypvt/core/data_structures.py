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

"""Core data structures for the positioning pipeline"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import numpy as np

from .constants import *
from .errors import UnknownCarrierError
from .satellite import sat2id, sat_to_char


class ObservableKind(Enum):
    """Physical quantity carried by a RINEX observation code.

    The first letter of the code selects the kind: C/P pseudorange,
    L carrier phase, D doppler, S signal strength.
    """
    PSEUDO_RANGE = 'C'
    PHASE_RANGE = 'L'
    DOPPLER = 'D'
    SSI = 'S'

    @classmethod
    def from_code(cls, observable: str) -> Optional['ObservableKind']:
        """Kind of a RINEX code ("C1C", "L2W" ...), None if unknown"""
        if not observable:
            return None
        letter = observable[0].upper()
        if letter == 'P':
            return cls.PSEUDO_RANGE
        for kind in cls:
            if kind.value == letter:
                return kind
        return None


class Carrier(Enum):
    """Carrier frequencies accepted by the solver interface"""
    L1 = 'L1'
    L2 = 'L2'
    L5 = 'L5'
    E5b = 'E5b'
    E5a5b = 'E5a5b'
    B1 = 'B1'
    B3 = 'B3'

    @property
    def frequency(self) -> float:
        """Carrier frequency in Hz"""
        return _CARRIER_FREQUENCIES[self]

    @property
    def wavelength(self) -> float:
        """Carrier wavelength in meters"""
        return CLIGHT / self.frequency

    @classmethod
    def from_observable(cls, sat: int, observable: str) -> 'Carrier':
        """Classify the carrier band of a RINEX observation code.

        The band digit (second character of the code) is interpreted per
        constellation. Galileo E1 and BeiDou B1C fold onto L1, Galileo E5a
        and BeiDou B2a onto L5.

        Parameters
        ----------
        sat : int
            Internal satellite number
        observable : str
            RINEX observation code, e.g. "C1C", "L5Q"

        Returns
        -------
        Carrier
            Matching carrier

        Raises
        ------
        UnknownCarrierError
            If the constellation/band pair is not supported (GLONASS FDMA,
            Galileo E6, BeiDou B2b-only, IRNSS S band ...)
        """
        system_char = sat_to_char(sat)
        band = observable[1:2] if len(observable) >= 2 else ''
        carrier = _BAND_TABLE.get(system_char, {}).get(band)
        if carrier is None:
            raise UnknownCarrierError(system_char.strip() or '?', observable)
        return carrier


_CARRIER_FREQUENCIES = {
    Carrier.L1: FREQ_L1,
    Carrier.L2: FREQ_L2,
    Carrier.L5: FREQ_L5,
    Carrier.E5b: FREQ_E5b,
    Carrier.E5a5b: FREQ_E5,
    Carrier.B1: FREQ_B1I,
    Carrier.B3: FREQ_B3,
}

# RINEX band digit per constellation character
_BAND_TABLE = {
    'G': {'1': Carrier.L1, '2': Carrier.L2, '5': Carrier.L5},
    'E': {'1': Carrier.L1, '5': Carrier.L5, '7': Carrier.E5b, '8': Carrier.E5a5b},
    'C': {'1': Carrier.L1, '2': Carrier.B1, '5': Carrier.L5, '6': Carrier.B3,
          '7': Carrier.E5b, '8': Carrier.E5a5b},
    'J': {'1': Carrier.L1, '2': Carrier.L2, '5': Carrier.L5},
    'S': {'1': Carrier.L1, '5': Carrier.L5},
    'I': {'5': Carrier.L5},
}


@dataclass(frozen=True)
class NavigationModel:
    """One broadcast navigation frame, owned by the ephemeris buffer.

    Attributes
    ----------
    sat : int
        Satellite number (internal numbering)
    toc : float
        Clock reference epoch, GPST seconds
    toe : float
        Orbit validity (reference) epoch, GPST seconds
    ephemeris : Any
        Broadcast parameters. A cssrlib ``Eph`` when decoded from RINEX;
        anything exposing ``svh``, ``f0``, ``f1``, ``f2`` and ``tgd`` works.
    """
    sat: int
    toc: float
    toe: float
    ephemeris: Any = field(compare=False, repr=False)

    @property
    def system(self) -> int:
        return sat2sys(self.sat)

    def max_age(self) -> float:
        """Half-width of the validity window around toe (s)"""
        fit = getattr(self.ephemeris, 'fit', 0) or 0
        if fit > 0:
            return fit * 3600.0 / 2.0

        sys = self.system
        if sys == SYS_GPS or sys == SYS_QZS:
            return MAXDTOE_GPS
        elif sys == SYS_GAL:
            return MAXDTOE_GAL
        elif sys == SYS_BDS:
            return MAXDTOE_BDS
        elif sys == SYS_GLO:
            return MAXDTOE_GLO
        return MAXDTOE_DEFAULT

    def is_valid(self, time: float) -> bool:
        """Healthy and within the validity window at ``time``"""
        if getattr(self.ephemeris, 'svh', 0) != 0:
            return False
        return abs(time - self.toe) <= self.max_age()

    def __str__(self):
        return f"{sat2id(self.sat)}(toc={self.toc:.1f}, toe={self.toe:.1f})"


@dataclass(frozen=True)
class SignalObservation:
    """One raw sample: (time, satellite, RINEX observation code, value).

    Pseudoranges are in meters, carrier phases in cycles and doppler in Hz,
    as recorded in RINEX.
    """
    time: float
    sat: int
    observable: str
    value: float

    @property
    def kind(self) -> Optional[ObservableKind]:
        return ObservableKind.from_code(self.observable)


@dataclass
class BandObservation:
    """All observables of one satellite on one carrier at one epoch"""
    carrier: Carrier
    pseudo_range_m: Optional[float] = None
    phase_range_m: Optional[float] = None
    doppler: Optional[float] = None
    snr: Optional[float] = None

    def update(self, kind: ObservableKind, value: float):
        """Set the field matching ``kind`` (phase given in cycles)"""
        if kind == ObservableKind.PSEUDO_RANGE:
            self.pseudo_range_m = value
        elif kind == ObservableKind.PHASE_RANGE:
            self.phase_range_m = value * self.carrier.wavelength
        elif kind == ObservableKind.DOPPLER:
            self.doppler = value
        elif kind == ObservableKind.SSI:
            self.snr = value


@dataclass
class Candidate:
    """Per-satellite, per-epoch bundle submitted to the solver.

    Attributes
    ----------
    sat : int
        Satellite number
    time : float
        Sampling epoch, GPST seconds
    observations : list[BandObservation]
        One record per carrier seen at this epoch
    """
    sat: int
    time: float
    observations: list[BandObservation] = field(default_factory=list)

    @property
    def system(self) -> int:
        return sat2sys(self.sat)

    @property
    def carriers(self) -> list[Carrier]:
        return [obs.carrier for obs in self.observations]

    def observation(self, carrier: Carrier) -> Optional[BandObservation]:
        for obs in self.observations:
            if obs.carrier == carrier:
                return obs
        return None

    def pseudo_range(self, carrier: Carrier) -> Optional[float]:
        obs = self.observation(carrier)
        return obs.pseudo_range_m if obs is not None else None


@dataclass(frozen=True)
class ClockCorrection:
    """Satellite clock offset handed to the solver.

    ``needs_relativistic_correction`` tells the solver that the relativistic
    term is not included in ``duration`` and must be applied by the solver.
    """
    duration: float = 0.0
    needs_relativistic_correction: bool = False

    @classmethod
    def without_relativistic_correction(cls, duration: float) -> 'ClockCorrection':
        return cls(duration=duration, needs_relativistic_correction=True)


class UserProfile(Enum):
    """Rover dynamics hint for the solver"""
    PEDESTRIAN = 'pedestrian'
    STATIC = 'static'
    CAR = 'car'
    AIRPLANE = 'airplane'
    ROCKET = 'rocket'


class ClockProfile(Enum):
    """Receiver clock quality hint for the solver"""
    OSCILLATOR = 'oscillator'
    QUARTZ = 'quartz'
    ATOMIC = 'atomic'
    H_MASER = 'h-maser'


@dataclass(frozen=True)
class UserParameters:
    """Run-time user/clock profile pair passed with every solver call"""
    profile: UserProfile = UserProfile.PEDESTRIAN
    clock_profile: ClockProfile = ClockProfile.OSCILLATOR


@dataclass
class PVTSolution:
    """GNSS positioning solution with position, velocity, and quality metrics.

    Attributes
    ----------
    time : float
        Solution epoch time in GPS time (seconds)
    type : int
        Solution type (SOLQ_NONE, SOLQ_FIX, SOLQ_FLOAT, etc.)
    rr : np.ndarray
        Position in ECEF coordinates (X, Y, Z in meters), shape (3,)
    vv : np.ndarray
        Velocity in ECEF coordinates (Vx, Vy, Vz in m/s), shape (3,)
    dtr : float
        Receiver clock offset (s)
    qr : np.ndarray
        Position and velocity covariance matrix, shape (6, 6)
    ns : int
        Number of satellites used in solution
    """
    time: float
    type: int = SOLQ_NONE

    rr: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vv: np.ndarray = field(default_factory=lambda: np.zeros(3))
    dtr: float = 0.0

    qr: np.ndarray = field(default_factory=lambda: np.zeros((6, 6)))

    ns: int = 0

    def get_llh(self):
        """Geodetic position [lat (rad), lon (rad), height (m)] on WGS84"""
        from ..coordinate import ecef2llh
        return ecef2llh(self.rr)
