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

"""Tabular view of positioning solutions"""

import numpy as np
import pandas as pd

from ..coordinate.transforms import ecef2llh
from ..core.constants import R2D

COLUMNS = ['x_m', 'y_m', 'z_m', 'vx_m_s', 'vy_m_s', 'vz_m_s',
           'lat_deg', 'lon_deg', 'height_m', 'clock_offset_s', 'solution_type', 'num_sats']


def solutions_dataframe(solutions) -> pd.DataFrame:
    """
    Convert solutions to a DataFrame indexed by GPST seconds

    Parameters
    ----------
    solutions : dict[float, PVTSolution] or Iterable[PVTSolution]
        Solutions as returned by the aggregator

    Returns
    -------
    pd.DataFrame
        One row per solution, sorted by time, with ECEF position and
        velocity, geodetic coordinates in degrees, receiver clock offset,
        solution type and number of satellites
    """
    if isinstance(solutions, dict):
        items = sorted(solutions.items(), key=lambda item: item[0])
    else:
        items = sorted(((sol.time, sol) for sol in solutions), key=lambda item: item[0])

    rows = []
    for t, sol in items:
        rr = np.asarray(sol.rr, dtype=float)
        vv = np.asarray(sol.vv, dtype=float)
        lat, lon, h = ecef2llh(rr)
        rows.append({
            'time': t,
            'x_m': rr[0], 'y_m': rr[1], 'z_m': rr[2],
            'vx_m_s': vv[0], 'vy_m_s': vv[1], 'vz_m_s': vv[2],
            'lat_deg': lat * R2D, 'lon_deg': lon * R2D, 'height_m': h,
            'clock_offset_s': sol.dtr,
            'solution_type': sol.type,
            'num_sats': sol.ns,
        })

    if not rows:
        return pd.DataFrame(columns=COLUMNS, index=pd.Index([], name='time', dtype=float))

    return pd.DataFrame(rows).set_index('time')[COLUMNS]
