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

"""
PyPVT - GNSS precise positioning pipeline

Streams broadcast ephemerides and RINEX observations through a shared
ephemeris buffer, resolves satellite orbits, clocks and propagation biases
on demand, and hands time-synchronized candidate batches to a positioning
solver (PPP, or RTK with a base station).
"""

__version__ = "1.0.0"
__author__ = "PyPVT Development Team"
__title__ = "pypvt"
__description__ = "GNSS precise positioning pipeline"

from .logger import setup_logger, setup_logger_from_config
from .core import *
from .coordinate import *
from .satellite import *
from .gnss import *
from .config import PositioningConfig, default_config, load_config, save_config
from .positioning import *
