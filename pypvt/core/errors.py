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

"""Exceptions raised by the positioning pipeline"""


class PositioningError(Exception):
    """Base class for all pypvt errors"""


class ConfigurationError(PositioningError):
    """Mandatory input is missing or invalid. Aborts the run."""


class UnknownCarrierError(PositioningError, ValueError):
    """Signal does not map to a supported carrier frequency"""

    def __init__(self, constellation: str, observable: str):
        self.constellation = constellation
        self.observable = observable
        super().__init__(f"{constellation}/{observable} - unknown carrier frequency")


class SolverError(PositioningError):
    """The solver rejected or failed on one epoch"""


class NoSolutionsError(PositioningError):
    """The run completed but no epoch produced a solution"""

    def __init__(self, message: str = "no solutions: check your settings or input"):
        super().__init__(message)
