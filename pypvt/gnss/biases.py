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

"""Spaceborn and environmental bias adapters

Both adapters answer per-satellite queries from the solver and never fail:
whenever the data needed for a correction is missing, the neutral value is
returned and a debug diagnostic is logged.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..coordinate.transforms import ecef2llh
from ..core.data_structures import ClockCorrection
from ..core.satellite import sat2id
from ..satellite.clock import broadcast_tgd, model_clock_offset
from ..satellite.ephemeris import EphemerisStore
from .troposphere import TroposphereModel

logger = logging.getLogger(__name__)


@dataclass
class BiasRuntime:
    """Ambient parameters of one bias query

    Attributes
    ----------
    time : float
        Query epoch, GPST seconds
    sat : int
        Satellite number
    elevation_rad : float
        Satellite elevation seen from the receiver
    azimuth_rad : float
        Satellite azimuth seen from the receiver
    rx_position_ecef_m : np.ndarray
        Receiver position (m)
    rx_llh : np.ndarray, optional
        Receiver geodetic position [lat, lon, h], derived from the ECEF
        position when not given
    """
    time: float
    sat: int
    elevation_rad: float
    azimuth_rad: float
    rx_position_ecef_m: np.ndarray
    rx_llh: Optional[np.ndarray] = None

    def __post_init__(self):
        self.rx_position_ecef_m = np.asarray(self.rx_position_ecef_m, dtype=float)
        if self.rx_llh is None:
            self.rx_llh = ecef2llh(self.rx_position_ecef_m)
        else:
            self.rx_llh = np.asarray(self.rx_llh, dtype=float)


class SpacebornBiases:
    """Satellite clock, group delay and Melbourne-Wubbena biases"""

    def __init__(self, store: EphemerisStore):
        self.store = store
        logger.info("spaceborn biases created & deployed")

    def clock_bias(self, rtm: BiasRuntime) -> ClockCorrection:
        """Broadcast clock offset, relativistic term left to the solver"""
        model = self.store.select(rtm.time, rtm.sat)
        if model is None:
            logger.debug(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - no clock model, null correction")
            return ClockCorrection()

        dt = model_clock_offset(model, rtm.time)
        if not math.isfinite(dt):
            logger.debug(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - invalid clock polynomial, null correction")
            return ClockCorrection()

        return ClockCorrection.without_relativistic_correction(dt)

    def group_delay(self, rtm: BiasRuntime) -> float:
        """Broadcast total group delay (s)"""
        model = self.store.select(rtm.time, rtm.sat)
        if model is None:
            logger.debug(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - no group delay available")
            return 0.0

        try:
            return broadcast_tgd(model)
        except (TypeError, ValueError):
            logger.debug(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - unreadable group delay")
            return 0.0

    def mw_bias(self, rtm: BiasRuntime) -> float:
        """Melbourne-Wubbena bias. Not published by broadcast messages: always 0."""
        return 0.0


class EnvironmentalBiases:
    """Ionospheric and tropospheric delays along the line of sight"""

    def __init__(self, troposphere: TroposphereModel = TroposphereModel.NIELL):
        self.troposphere = troposphere
        logger.info(f"environmental biases created & deployed ({troposphere.value} troposphere)")

    def ionosphere_bias_m(self, rtm: BiasRuntime) -> float:
        """No ionosphere model is deployed: always 0 m"""
        logger.trace(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - ionosphere not modeled")
        return 0.0

    def troposphere_bias_m(self, rtm: BiasRuntime) -> float:
        """Slant tropospheric delay (m)"""
        if not rtm.elevation_rad > 0.0:
            logger.debug(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - below horizon, no tropospheric delay")
            return 0.0

        lat, _, height = rtm.rx_llh
        delay = self.troposphere.delay_m(rtm.time, lat, height, rtm.elevation_rad)
        if not math.isfinite(delay):
            logger.debug(f"{rtm.time:.3f}({sat2id(rtm.sat)}) - tropospheric model diverged")
            return 0.0
        return delay
