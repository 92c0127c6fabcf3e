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

"""Run configuration

A run is described by a small set of options: the user and clock profiles
handed to the solver, the tropospheric model, an optional a-priori receiver
position, whether the final epoch of the stream is submitted, opaque solver
options and the logging setup. Options are read from JSON or YAML files.

Example YAML file::

    user_profile: car
    clock_profile: quartz
    flush_last_epoch: true
    troposphere_model: niell
    apriori_position_ecef_m: [4027893.6, 307045.6, 4919475.0]
    solver:
      min_sv_elev: 10.0
    logging:
      default_level: INFO
      module_levels:
        satellite.ephemeris: DEBUG
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import numpy as np
import yaml

from .core.data_structures import ClockProfile, UserParameters, UserProfile
from .core.errors import ConfigurationError
from .gnss.troposphere import TroposphereModel


def _parse_enum(enum_cls, value, option: str):
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower().replace('_', '-')
    for member in enum_cls:
        if member.value == text:
            return member
    choices = ', '.join(m.value for m in enum_cls)
    raise ConfigurationError(f"invalid {option} \"{value}\" (expected one of: {choices})")


@dataclass
class PositioningConfig:
    """Options of one positioning run

    Attributes
    ----------
    user_profile : UserProfile
        Rover dynamics, pedestrian by default
    clock_profile : ClockProfile
        Receiver clock quality, oscillator by default
    flush_last_epoch : bool
        Submit the final epoch of the observation stream
    apriori_position_ecef_m : tuple, optional
        A-priori receiver position (m) handed to the solver
    troposphere_model : TroposphereModel
        Slant delay model of the environmental biases
    solver : dict
        Options forwarded untouched to the solver factory
    logging : dict
        Forwarded to :func:`pypvt.logger.setup_logger_from_config`
    """
    user_profile: UserProfile = UserProfile.PEDESTRIAN
    clock_profile: ClockProfile = ClockProfile.OSCILLATOR
    flush_last_epoch: bool = False
    apriori_position_ecef_m: Optional[tuple] = None
    troposphere_model: TroposphereModel = TroposphereModel.NIELL
    solver: dict = field(default_factory=dict)
    logging: dict = field(default_factory=dict)

    def __post_init__(self):
        self.user_profile = _parse_enum(UserProfile, self.user_profile, 'user profile')
        self.clock_profile = _parse_enum(ClockProfile, self.clock_profile, 'clock profile')
        self.troposphere_model = _parse_enum(TroposphereModel, self.troposphere_model, 'troposphere model')

        if not isinstance(self.flush_last_epoch, bool):
            raise ConfigurationError(f"flush_last_epoch must be a boolean, got {self.flush_last_epoch!r}")

        if self.apriori_position_ecef_m is not None:
            try:
                position = np.asarray(self.apriori_position_ecef_m, dtype=float).reshape(-1)
            except (TypeError, ValueError):
                position = np.array([])
            if position.shape != (3,) or not np.all(np.isfinite(position)):
                raise ConfigurationError(
                    f"apriori_position_ecef_m must be three finite coordinates, got {self.apriori_position_ecef_m!r}")
            self.apriori_position_ecef_m = tuple(float(v) for v in position)

        if not isinstance(self.solver, dict) or not isinstance(self.logging, dict):
            raise ConfigurationError("solver and logging options must be mappings")

    @property
    def user_parameters(self) -> UserParameters:
        return UserParameters(self.user_profile, self.clock_profile)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'PositioningConfig':
        """Build from a plain mapping, rejecting unknown options"""
        data = dict(data or {})
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"unknown configuration option(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> dict:
        return {
            'user_profile': self.user_profile.value,
            'clock_profile': self.clock_profile.value,
            'flush_last_epoch': self.flush_last_epoch,
            'apriori_position_ecef_m': (list(self.apriori_position_ecef_m)
                                        if self.apriori_position_ecef_m is not None else None),
            'troposphere_model': self.troposphere_model.value,
            'solver': dict(self.solver),
            'logging': dict(self.logging),
        }


def default_config() -> PositioningConfig:
    """Configuration used when none is provided"""
    return PositioningConfig()


def load_config(filepath: Union[str, Path]) -> PositioningConfig:
    """
    Load a run configuration from file.

    The format is determined from the file extension (.json, .yaml, .yml).

    Raises
    ------
    ConfigurationError
        If the file cannot be read or parsed, or holds invalid options
    """
    filepath = Path(filepath)

    suffix = filepath.suffix.lower()
    if suffix not in ('.json', '.yaml', '.yml'):
        raise ConfigurationError(f"unsupported configuration format: {filepath.suffix}")

    try:
        with open(filepath) as f:
            if suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"failed to read configuration: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"failed to parse configuration: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{filepath.name}: configuration must be a mapping")

    return PositioningConfig.from_dict(data)


def save_config(config: PositioningConfig, filepath: Union[str, Path]) -> None:
    """Write a configuration, format from the file extension"""
    filepath = Path(filepath)
    suffix = filepath.suffix.lower()
    data = config.to_dict()

    if suffix in ('.yaml', '.yml'):
        with open(filepath, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False)
    elif suffix == '.json':
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)
    else:
        raise ConfigurationError(f"unsupported configuration format: {filepath.suffix}")
