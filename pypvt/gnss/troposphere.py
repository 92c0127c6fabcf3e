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


"""Tropospheric delay models for GNSS.

Slant tropospheric delay used by the environmental bias adapter, built on
the cssrlib models:

- Saastamoinen zenith hydrostatic and wet delays, evaluated on a standard
  atmosphere at the receiver height (``cssrlib.gnss.tropmodel``).
- Niell (1996) hydrostatic and wet mapping functions
  (``cssrlib.gnss.tropmapf``).

All delays are in meters, all angles in radians, epochs in GPST seconds.
"""

from enum import Enum

import numpy as np
from cssrlib.gnss import gpst2time, tropmapf, tropmodel

from ..core.time import gps_seconds_to_week_tow

# Receiver heights outside this range get no tropospheric correction (m)
MIN_HEIGHT = -100.0
MAX_HEIGHT = 1.0e4

STANDARD_HUMIDITY = 0.7


def _gtime(t: float):
    week, tow = gps_seconds_to_week_tow(t)
    return gpst2time(week, tow)


def saastamoinen_zenith(t: float, lat: float, height: float,
                        humidity: float = STANDARD_HUMIDITY) -> tuple[float, float]:
    """
    Saastamoinen zenith delays on a standard atmosphere

    Parameters:
    -----------
    t : float
        Epoch, GPST seconds
    lat : float
        Receiver latitude (rad)
    height : float
        Receiver ellipsoidal height (m), used as altitude above sea level
    humidity : float
        Relative humidity in [0, 1]

    Returns:
    --------
    tuple[float, float]
        (hydrostatic, wet) zenith delays (m). Zero outside the
        [-100 m, 10 km] height range.
    """
    if height < MIN_HEIGHT or height > MAX_HEIGHT:
        return 0.0, 0.0

    zhd, zwd, _ = tropmodel(_gtime(t), [lat, 0.0, max(height, 0.0)], humi=humidity)
    return float(zhd), float(zwd)


def niell_mapping(t: float, lat: float, height: float, elevation: float) -> tuple[float, float]:
    """Niell (hydrostatic, wet) mapping factors, (0, 0) at or below the horizon"""
    map_hyd, map_wet = tropmapf(_gtime(t), [lat, 0.0, height], elevation)
    return float(map_hyd), float(map_wet)


class TroposphereModel(Enum):
    """Slant tropospheric delay models

    NIELL:        Saastamoinen zenith delays, Niell mapping functions
    SAASTAMOINEN: Saastamoinen zenith delays, 1/sin(el) mapping
    """
    NIELL = 'niell'
    SAASTAMOINEN = 'saastamoinen'

    def delay_m(self, t: float, lat: float, height: float, elevation: float) -> float:
        """Slant delay (m) at GPST seconds ``t``, 0.0 at or below the horizon"""
        if elevation <= 0.0:
            return 0.0

        zhd, zwd = saastamoinen_zenith(t, lat, height)
        if zhd == 0.0 and zwd == 0.0:
            return 0.0

        if self is TroposphereModel.NIELL:
            map_hyd, map_wet = niell_mapping(t, lat, height, elevation)
        else:
            map_hyd = map_wet = 1.0 / np.sin(elevation)

        return zhd * map_hyd + zwd * map_wet
