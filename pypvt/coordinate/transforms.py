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

"""Geodetic and local-level transforms used by the bias adapters"""

import numpy as np

from ..core.constants import FE_WGS84, RE_WGS84

# first eccentricity squared
_E2 = FE_WGS84 * (2.0 - FE_WGS84)


def ecef2llh(xyz: np.ndarray) -> np.ndarray:
    """Convert ECEF coordinates to geodetic coordinates on WGS84

    Parameters
    ----------
    xyz : np.ndarray
        ECEF coordinates [x, y, z] in meters

    Returns
    -------
    np.ndarray
        [lat (rad), lon (rad), height (m)]

    Notes
    -----
    Fixed-point iteration on latitude, converged to well below a millimeter
    after five passes for terrestrial and orbital radii. The Earth center
    maps to [0, 0, -a].
    """
    x, y, z = float(xyz[0]), float(xyz[1]), float(xyz[2])

    p = np.hypot(x, y)
    if p == 0.0 and z == 0.0:
        return np.array([0.0, 0.0, -RE_WGS84])

    lon = np.arctan2(y, x)
    lat = np.arctan2(z, p * (1.0 - _E2))
    h = 0.0
    for _ in range(5):
        sin_lat = np.sin(lat)
        N = RE_WGS84 / np.sqrt(1.0 - _E2 * sin_lat**2)
        if p > 1e-9:
            h = p / np.cos(lat) - N
        else:
            h = abs(z) - N * (1.0 - _E2)
        lat = np.arctan2(z, p * (1.0 - _E2 * N / (N + h)))

    return np.array([lat, lon, h])


def llh2ecef(llh: np.ndarray) -> np.ndarray:
    """Convert geodetic [lat (rad), lon (rad), height (m)] to ECEF meters"""
    lat, lon, h = llh[0], llh[1], llh[2]

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    N = RE_WGS84 / np.sqrt(1.0 - _E2 * sin_lat**2)

    return np.array([
        (N + h) * cos_lat * np.cos(lon),
        (N + h) * cos_lat * np.sin(lon),
        (N * (1.0 - _E2) + h) * sin_lat,
    ])


def ecef2enu_dcm(llh: np.ndarray) -> np.ndarray:
    """Rotation matrix taking ECEF vectors into the local ENU frame at llh"""
    lat, lon = llh[0], llh[1]
    sin_lat, cos_lat = np.sin(lat), np.cos(lat)
    sin_lon, cos_lon = np.sin(lon), np.cos(lon)

    return np.array([
        [-sin_lon, cos_lon, 0.0],
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
    ])


def ecef2enu(xyz: np.ndarray, org_llh: np.ndarray) -> np.ndarray:
    """ENU offset (m) of an ECEF point relative to a geodetic origin"""
    return ecef2enu_dcm(org_llh) @ (np.asarray(xyz, dtype=float) - llh2ecef(org_llh))


def satellite_azel(sat_ecef: np.ndarray, rx_ecef: np.ndarray) -> tuple[float, float]:
    """Azimuth and elevation of a satellite seen from a receiver

    Parameters
    ----------
    sat_ecef : np.ndarray
        Satellite ECEF position (m)
    rx_ecef : np.ndarray
        Receiver ECEF position (m)

    Returns
    -------
    tuple[float, float]
        (azimuth, elevation) in radians. Azimuth is in [0, 2*pi), measured
        clockwise from north. A receiver at the Earth center sees every
        satellite at zenith.
    """
    rx_ecef = np.asarray(rx_ecef, dtype=float)
    if np.linalg.norm(rx_ecef) < 1.0:
        return 0.0, np.pi / 2.0

    enu = ecef2enu(sat_ecef, ecef2llh(rx_ecef))
    horizontal = np.hypot(enu[0], enu[1])
    az = np.arctan2(enu[0], enu[1]) % (2.0 * np.pi)
    el = np.arctan2(enu[2], horizontal)
    return float(az), float(el)
