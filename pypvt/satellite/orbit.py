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

"""Satellite orbit states from broadcast ephemerides"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

import numpy as np

import cssrlib.ephemeris
from cssrlib.gnss import gpst2time

from ..coordinate.frames import ecef2eci
from ..core.satellite import sat2id
from ..core.time import gps_seconds_to_week_tow
from .ephemeris import EphemerisStore

logger = logging.getLogger(__name__)


class Frame(Enum):
    """Reference frames an orbit state can be expressed in"""
    ECEF = 'ECEF'
    ECI = 'ECI'

    @classmethod
    def parse(cls, frame: Union[str, 'Frame']) -> 'Frame':
        if isinstance(frame, Frame):
            return frame
        try:
            return cls(str(frame).upper())
        except ValueError:
            raise ValueError(f"unsupported reference frame: {frame}") from None


@dataclass
class OrbitState:
    """Satellite position and velocity at one instant

    Attributes
    ----------
    time : float
        GPST seconds
    sat : int
        Satellite number
    position_m : np.ndarray
        Position (m), shape (3,)
    velocity_m_s : np.ndarray
        Velocity (m/s), shape (3,)
    frame : Frame
        Frame of both vectors
    """
    time: float
    sat: int
    position_m: np.ndarray
    velocity_m_s: np.ndarray
    frame: Frame = Frame.ECEF


def kepler_to_cartesian(t: float, ephemeris) -> tuple[np.ndarray, np.ndarray]:
    """ECEF position and velocity from Keplerian broadcast elements

    Thin wrapper over ``cssrlib.ephemeris.eph2pos``.

    Parameters
    ----------
    t : float
        GPST seconds
    ephemeris : cssrlib.gnss.Eph
        Broadcast ephemeris

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (position in m, velocity in m/s), ECEF
    """
    week, tow = gps_seconds_to_week_tow(t)
    rs, vs, _ = cssrlib.ephemeris.eph2pos(gpst2time(week, tow), ephemeris, True)
    return np.asarray(rs, dtype=float), np.asarray(vs, dtype=float)


KeplerTransform = Callable[[float, object], Optional[tuple]]


class OrbitResolver:
    """Orbit source backed by the shared ephemeris buffer

    Parameters
    ----------
    store : EphemerisStore
        Buffer shared with the clock bias adapter
    transform : callable, optional
        ``transform(t, ephemeris) -> (position, velocity)`` in ECEF.
        Defaults to :func:`kepler_to_cartesian`.
    """

    def __init__(self, store: EphemerisStore, transform: Optional[KeplerTransform] = None):
        self.store = store
        self.transform = transform or kepler_to_cartesian
        logger.info("orbit source created & deployed")

    def state_at(self, time: float, sat: int, frame: Union[str, Frame] = Frame.ECEF) -> Optional[OrbitState]:
        """Satellite state at ``time``, None when it cannot be resolved

        Raises
        ------
        ValueError
            If ``frame`` is not a supported reference frame
        """
        frame = Frame.parse(frame)

        model = self.store.select(time, sat)
        if model is None:
            logger.error(f"{time:.3f}({sat2id(sat)}) - no ephemeris available")
            return None

        try:
            result = self.transform(time, model.ephemeris)
        except (ArithmeticError, ValueError, AttributeError, TypeError, KeyError, IndexError) as e:
            logger.error(f"{time:.3f}({sat2id(sat)}) - kepler solver failed: {e}")
            return None

        if result is None:
            logger.error(f"{time:.3f}({sat2id(sat)}) - kepler solver failed")
            return None

        position = np.asarray(result[0], dtype=float)
        velocity = np.asarray(result[1], dtype=float)
        if not (np.all(np.isfinite(position)) and np.all(np.isfinite(velocity))):
            logger.error(f"{time:.3f}({sat2id(sat)}) - kepler solver failed: non finite state")
            return None

        if frame == Frame.ECI:
            position, velocity = ecef2eci(time, position, velocity)

        x_km, y_km, z_km = position / 1e3
        logger.debug(f"{time:.3f}({sat2id(sat)}) - kepler state: "
                     f"x={x_km:.3f}km y={y_km:.3f}km z={z_km:.3f}km ({frame.value})")

        return OrbitState(time, sat, position, velocity, frame)
