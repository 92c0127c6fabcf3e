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

"""Earth-fixed / inertial frame rotation.

The inertial frame is the ECEF frame frozen at the GPST origin and rotated
back by the Earth rate over the elapsed time. Precession, nutation and polar
motion are ignored.
"""

import numpy as np

from ..core.constants import OMGE


def ecef2eci_dcm(t: float) -> np.ndarray:
    """ECEF to ECI rotation after t seconds of Earth rotation"""
    sin_wt = np.sin(OMGE * t)
    cos_wt = np.cos(OMGE * t)

    return np.array([
        [cos_wt, -sin_wt, 0.0],
        [sin_wt, cos_wt, 0.0],
        [0.0, 0.0, 1.0]
    ], dtype=np.float64)


def eci2ecef_dcm(t: float) -> np.ndarray:
    """ECI to ECEF rotation, the transpose of :func:`ecef2eci_dcm`"""
    return ecef2eci_dcm(t).T


def ecef2eci(t: float, position: np.ndarray, velocity=None):
    """Rotate an ECEF state into the inertial frame

    Parameters
    ----------
    t : float
        GPST seconds
    position : np.ndarray
        ECEF position (m)
    velocity : np.ndarray, optional
        ECEF velocity (m/s). The Earth-rate transport term is added.

    Returns
    -------
    tuple
        (position, velocity) in ECI, velocity None when not given
    """
    C = ecef2eci_dcm(t)
    r = np.asarray(position, dtype=float)
    r_eci = C @ r
    if velocity is None:
        return r_eci, None

    omega = np.array([0.0, 0.0, OMGE])
    v_eci = C @ (np.asarray(velocity, dtype=float) + np.cross(omega, r))
    return r_eci, v_eci


def eci2ecef(t: float, position: np.ndarray, velocity=None):
    """Inverse of :func:`ecef2eci`"""
    C = eci2ecef_dcm(t)
    r_ecef = C @ np.asarray(position, dtype=float)
    if velocity is None:
        return r_ecef, None

    omega = np.array([0.0, 0.0, OMGE])
    v_ecef = C @ np.asarray(velocity, dtype=float) - np.cross(omega, r_ecef)
    return r_ecef, v_ecef
