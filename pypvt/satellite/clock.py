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

"""Satellite clock and group delay from broadcast parameters"""

import numpy as np

from ..core.data_structures import NavigationModel

CLOCK_ITERATIONS = 10


def clock_polynomial(t: float, toc: float, f0: float, f1: float, f2: float,
                     iterations: int = CLOCK_ITERATIONS) -> float:
    """
    Broadcast clock offset at transmit time

    Parameters:
    -----------
    t : float
        Transmit time read on the satellite clock (GPST seconds)
    toc : float
        Clock reference epoch (GPST seconds)
    f0, f1, f2 : float
        Bias (s), drift (s/s) and drift rate (s/s^2)
    iterations : int
        Fixed-point refinements of the elapsed time

    Returns:
    --------
    float
        Clock offset f0 + f1*dt + f2*dt^2 (s), where dt is the elapsed time
        since toc corrected for the offset itself. The relativistic term is
        not included.
    """
    ts = t - toc
    dt = ts
    for _ in range(iterations):
        dt = ts - (f0 + f1 * dt + f2 * dt**2)
    return f0 + f1 * dt + f2 * dt**2


def model_clock_offset(model: NavigationModel, t: float, iterations: int = CLOCK_ITERATIONS) -> float:
    """Clock offset of a buffered navigation model at ``t``"""
    eph = model.ephemeris
    return clock_polynomial(t, model.toc,
                            getattr(eph, 'f0', 0.0) or 0.0,
                            getattr(eph, 'f1', 0.0) or 0.0,
                            getattr(eph, 'f2', 0.0) or 0.0,
                            iterations)


def broadcast_tgd(model: NavigationModel) -> float:
    """Broadcast group delay (s), 0.0 when not published

    cssrlib stores ``tgd`` either as a scalar or as an array whose first
    entry is the L1/E1/B1 group delay.
    """
    tgd = getattr(model.ephemeris, 'tgd', None)
    if tgd is None:
        return 0.0
    values = np.ravel(np.asarray(tgd, dtype=float))
    return float(values[0]) if values.size else 0.0
