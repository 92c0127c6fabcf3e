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

"""Core Module.

Fundamental components shared by the whole pipeline:

- **Constants**: frequencies, system identifiers, validity periods
- **Satellite numbering**: unified integer identifiers and RINEX ids
- **Data Structures**: navigation models, signal samples, candidates,
  solutions and solver profiles
- **Time Systems**: GNSSTime and generic time-scale conversion
- **Time Corrections**: optional precise correction database and the
  service consulted per epoch
- **Errors**: the exception hierarchy

Example Usage:
    >>> from pypvt.core import *
    >>>
    >>> sample = SignalObservation(time=1.4e9, sat=id2sat('G01'),
    ...                            observable='C1C', value=20000000.0)
    >>> Carrier.from_observable(sample.sat, sample.observable)
    <Carrier.L1: 'L1'>
"""

from .constants import *
from .data_structures import *
from .errors import *
from .satellite import id2sat, sat2id
from .time import *
from .time_corrections import *
