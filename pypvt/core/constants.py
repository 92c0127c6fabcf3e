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

"""GNSS Constants and System Parameters"""

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)
FREQ_L5 = 1.17645E9   # L5 frequency (Hz)

# Galileo frequencies
FREQ_E5b = 1.20714E9  # E5b frequency (Hz)
FREQ_E5 = 1.191795E9  # E5 (E5a+E5b) frequency (Hz)

# BeiDou frequencies
FREQ_B1I = 1.561098E9  # BeiDou B1I frequency (Hz)
FREQ_B3 = 1.26852E9    # BeiDou B3 frequency (Hz)

# GNSS System IDs
SYS_NONE = 0x00   # invalid satellite
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS
SYS_SBS = 0x20    # SBAS
SYS_IRN = 0x40    # IRNSS

# Time System Parameters
GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch

WEEK_SECONDS = 604800.0        # seconds per week

# Time system offsets (as of 2025)
GPS_UTC_OFFSET = 18.0          # GPS-UTC leap seconds
GPS_BDS_OFFSET = 14.0          # GPS-BeiDou time offset (seconds)
GLO_UTC_OFFSET = 3 * 3600.0    # GLONASS time is UTC(SU) + 3h

# Ephemeris validity periods (s), measured from toe
MAXDTOE_GPS = 7200.0           # GPS/QZSS: 2 hours
MAXDTOE_GAL = 10800.0          # Galileo: 3 hours
MAXDTOE_BDS = 21600.0          # BeiDou: 6 hours
MAXDTOE_GLO = 1800.0           # GLONASS: 30 minutes
MAXDTOE_DEFAULT = 3600.0       # other systems: 1 hour

# Earth Parameters (WGS84)
RE_WGS84 = 6378137.0           # earth semimajor axis (m)
FE_WGS84 = 1.0 / 298.257223563 # earth flattening
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)

# Unit conversions
R2D = 180.0 / np.pi            # radians to degrees
D2R = np.pi / 180.0            # degrees to radians

# Solution Status
SOLQ_NONE = 0       # no solution
SOLQ_FIX = 1        # fixed solution
SOLQ_FLOAT = 2      # float solution
SOLQ_SINGLE = 5     # single point positioning


# Satellite system functions
def sat2sys(sat):
    """Get satellite system from satellite number

    Uses unified satellite numbering from satellite.py
    """
    from .satellite import SATELLITE_RANGES

    if sat <= 0 or sat > 255:
        return SYS_NONE

    for sys_id, ranges in SATELLITE_RANGES.items():
        for start, end in ranges:
            if start <= sat <= end:
                return sys_id

    return SYS_NONE


def sat2prn(sat):
    """Get PRN number from satellite number"""
    from .satellite import sat_to_prn
    return sat_to_prn(sat)
