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

"""Precise positioning run: wires the shared components around a solver"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from ..config import PositioningConfig, default_config
from ..core.data_structures import NavigationModel, PVTSolution, SignalObservation
from ..core.errors import ConfigurationError, NoSolutionsError
from ..core.time_corrections import CorrectionDatabase, TimeCorrectionService
from ..gnss.biases import EnvironmentalBiases, SpacebornBiases
from ..logger import setup_logger_from_config
from ..satellite.ephemeris import EphemerisStore
from ..satellite.orbit import KeplerTransform, OrbitResolver
from .aggregator import ObservationAggregator, Solver
from .rtk import BaseStationBuffer

logger = logging.getLogger(__name__)

# SP3 clock states sampled this sparsely interpolate poorly (s)
SP3_CLOCK_SAMPLING_LIMIT = 300.0


class NullEphemerisSource:
    """Raw ephemeris interface of the solver. Not used by this application."""

    def ephemeris_data(self, time: float, sat: int):
        return None


@dataclass
class SolverInterfaces:
    """Everything a solver factory may hook the solver onto

    Attributes
    ----------
    orbits : OrbitResolver
        Satellite states from the shared ephemeris buffer
    spaceborn : SpacebornBiases
        Satellite clock and group delay
    environment : EnvironmentalBiases
        Atmospheric delays
    time : TimeCorrectionService
        Time-scale conversions
    ephemeris : NullEphemerisSource
        Raw ephemeris interface, always empty
    base_station : BaseStationBuffer, optional
        RTK reference station
    apriori_position_ecef_m : tuple, optional
        A-priori receiver position (m)
    options : dict
        Solver options from the run configuration
    """
    orbits: OrbitResolver
    spaceborn: SpacebornBiases
    environment: EnvironmentalBiases
    time: TimeCorrectionService
    ephemeris: NullEphemerisSource = field(default_factory=NullEphemerisSource)
    base_station: Optional[BaseStationBuffer] = None
    apriori_position_ecef_m: Optional[tuple] = None
    options: dict = field(default_factory=dict)


SolverFactory = Callable[[SolverInterfaces], Solver]


def check_time_scale_compliancy(obs_time_scale: Optional[str], clock_time_scale: Optional[str],
                                clock_source: str = "CLK",
                                sampling_period: Optional[float] = None) -> bool:
    """
    Verify observations and clock products share a time scale

    Parameters:
    -----------
    obs_time_scale : str
        Time scale of the first observation ('GPS', 'GAL' ...)
    clock_time_scale : str
        Time scale of the clock product
    clock_source : str
        'CLK' for clock RINEX, 'SP3' for SP3 clock states
    sampling_period : float, optional
        Clock product sampling period (s), checked for SP3

    Returns:
    --------
    bool
        True when both scales match. Mismatches are only reported, the run
        continues with small errors.
    """
    if obs_time_scale is None or clock_time_scale is None:
        return True

    if obs_time_scale.upper() == clock_time_scale.upper():
        logger.info("Temporal PPP compliancy")
        return True

    logger.error(f"Working with different timescales in OBS/{clock_source} is not PPP compatible "
                 "and will generate tiny errors")
    if clock_source.upper() == "SP3":
        if sampling_period is not None and sampling_period >= SP3_CLOCK_SAMPLING_LIMIT:
            logger.warning("Interpolating clock states from low sample rate SP3 will most likely introduce errors")
    else:
        logger.warning(f"Consider using OBS/{clock_source} files expressed in the same timescale for optimal results")
    return False


def precise_positioning(navigation: Iterable[NavigationModel],
                        observations: Iterable[SignalObservation],
                        solver_factory: SolverFactory,
                        config: Optional[PositioningConfig] = None,
                        base_observations: Optional[Iterable[SignalObservation]] = None,
                        base_header=None,
                        time_corrections: Optional[CorrectionDatabase] = None,
                        kepler_transform: Optional[KeplerTransform] = None) -> dict[float, PVTSolution]:
    """
    Run PPP (or RTK when base observations are given) over a whole stream

    Parameters:
    -----------
    navigation : Iterable[NavigationModel]
        Broadcast navigation models, ordered by toe
    observations : Iterable[SignalObservation]
        Rover samples, ordered by time
    solver_factory : callable
        Builds the solver from the :class:`SolverInterfaces`
    config : PositioningConfig, optional
        Run options, defaults when None
    base_observations : Iterable[SignalObservation], optional
        Base station samples, turns on RTK
    base_header : mapping or object, optional
        Base station header holding its reference position
    time_corrections : CorrectionDatabase, optional
        Precise time-scale corrections
    kepler_transform : callable, optional
        Replaces the cssrlib Kepler transform of the orbit source

    Returns:
    --------
    dict[float, PVTSolution]
        Solutions keyed by GPST seconds, in time order

    Raises:
    -------
    ConfigurationError
        Missing navigation or observation data, missing base coordinates
    NoSolutionsError
        No epoch produced a solution
    """
    config = config or default_config()
    if config.logging:
        setup_logger_from_config(config.logging)

    if navigation is None:
        raise ConfigurationError("Positioning requires Navigation RINEX")
    if observations is None:
        raise ConfigurationError("Positioning requires Observation RINEX")

    base_station = None
    if base_observations is not None:
        base_station = BaseStationBuffer.from_header(base_header, base_observations)

    store = EphemerisStore(navigation)
    interfaces = SolverInterfaces(
        orbits=OrbitResolver(store, kepler_transform),
        spaceborn=SpacebornBiases(store),
        environment=EnvironmentalBiases(config.troposphere_model),
        time=TimeCorrectionService(time_corrections),
        base_station=base_station,
        apriori_position_ecef_m=config.apriori_position_ecef_m,
        options=dict(config.solver),
    )
    solver = solver_factory(interfaces)

    logger.info(f"deployed with {config.user_profile.value} profile - "
                f"clock profile: {config.clock_profile.value}")

    aggregator = ObservationAggregator(solver, store, config.user_parameters,
                                       interfaces.time, base_station)
    aggregator.process(observations)
    if config.flush_last_epoch:
        aggregator.flush()

    if not aggregator.solutions:
        logger.error("solver did not generate a single solution")
        logger.error("verify your input data and configuration setup")
        raise NoSolutionsError()

    return aggregator.solutions
