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

"""Positioning Module

Epoch synchronization of observation streams, RTK base buffering and the
precise positioning entry point.

Example Usage:
    >>> from pypvt.positioning import precise_positioning
    >>> from pypvt.io import read_nav, read_obs, navigation_models, signal_observations
    >>>
    >>> nav = read_nav('brdc0010.24p')
    >>> epochs = read_obs('rover0010.24o')
    >>> solutions = precise_positioning(navigation_models(nav),
    ...                                 signal_observations(epochs),
    ...                                 solver_factory=MySolver)
"""

from .accumulator import CandidateAccumulator
from .aggregator import ObservationAggregator, Solver
from .pipeline import (
    NullEphemerisSource,
    SolverInterfaces,
    check_time_scale_compliancy,
    precise_positioning,
)
from .post_process import solutions_dataframe
from .rtk import BaseStationBuffer
