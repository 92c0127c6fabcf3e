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

"""RINEX adapters over the cssrlib decoder

cssrlib does the parsing. The functions below turn its ``Nav`` and ``Obs``
objects into the streams consumed by the pipeline: navigation models sorted
by toe, and signal samples in epoch order. cssrlib satellite numbers are
translated through RINEX identifiers into the package numbering.
"""

from __future__ import annotations

import logging
import math
from copy import deepcopy
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import numpy as np

from cssrlib.gnss import Nav, rSigRnx, sat2prn, time2gpst, uTYP
from cssrlib.gnss import sat2id as cssr_sat2id
from cssrlib.rinex import rnxdec

from ..core.constants import WEEK_SECONDS
from ..core.data_structures import NavigationModel, SignalObservation
from ..core.satellite import id2sat

logger = logging.getLogger(__name__)

# cssrlib measurement arrays per observable type
_OBS_ARRAYS = {uTYP.C: 'P', uTYP.L: 'L', uTYP.D: 'D', uTYP.S: 'S'}


def gtime_to_seconds(t) -> float:
    """GPST seconds of a cssrlib ``gtime_t``"""
    week, tow = time2gpst(t)
    return week * WEEK_SECONDS + tow


def read_nav(filename: str) -> Nav:
    """Decode a RINEX navigation file into a cssrlib Nav object."""

    nav = Nav()
    decoder = rnxdec()
    decoder.decode_nav(str(filename), nav, append=False)
    return nav


def _prepare_decoder(decoder: rnxdec) -> None:
    # accept every signal declared in the header
    decoder.setSignals([])

    for sys, sigs in decoder.sig_map.items():
        for sig in sigs.values():
            decoder.sig_tab.setdefault(sys, {}).setdefault(sig.typ, [])
            if sig not in decoder.sig_tab[sys][sig.typ]:
                decoder.sig_tab[sys][sig.typ].append(sig)

    max_counts = {typ: 0 for typ in decoder.nsig}
    for sigs in decoder.sig_tab.values():
        for typ, sig_list in sigs.items():
            max_counts[typ] = max(max_counts[typ], len(sig_list))

    for typ, count in max_counts.items():
        decoder.nsig[typ] = count

    # cssrlib expects the same number of signals for every system
    for sigs in decoder.sig_tab.values():
        for typ, sig_list in sigs.items():
            if not sig_list:
                continue
            while len(sig_list) < max_counts[typ]:
                sig_list.append(sig_list[-1])


def read_obs(filename: str, signal_codes: List[str] | None = None) -> List:
    """Decode a RINEX observation file into cssrlib Obs epochs.

    ``signal_codes`` restricts decoding to signals such as "GC1C"; all
    signals of the header are kept when omitted.
    """

    decoder = rnxdec()
    if signal_codes:
        decoder.setSignals([rSigRnx(code) for code in signal_codes])
    if decoder.decode_obsh(str(filename)) < 0:
        raise RuntimeError("Unsupported RINEX version")

    if not signal_codes:
        _prepare_decoder(decoder)

    epochs: List = []
    while True:
        obs = decoder.decode_obs()
        if obs is None or len(obs.sat) == 0:
            break
        epochs.append(deepcopy(obs))
    return epochs


def read_obs_header(filename: str) -> dict:
    """Station metadata of a RINEX observation header

    Returns
    -------
    dict
        ``marker_name`` (str or None), ``approx_position`` (ECEF meters as
        np.ndarray, None when absent or all zeros) and ``time_system`` of
        the first observation (str or None)
    """
    header = {'marker_name': None, 'approx_position': None, 'time_system': None}

    with open(filename) as f:
        for line in f:
            label = line[60:].strip()
            if label == 'END OF HEADER':
                break
            if label == 'MARKER NAME':
                header['marker_name'] = line[:60].strip() or None
            elif label == 'APPROX POSITION XYZ':
                try:
                    position = np.array([float(v) for v in line[:42].split()[:3]])
                except ValueError:
                    logger.error(f"{filename}: unreadable APPROX POSITION XYZ")
                    continue
                if position.shape == (3,) and np.any(position != 0.0):
                    header['approx_position'] = position
            elif label == 'TIME OF FIRST OBS':
                header['time_system'] = line[48:51].strip() or None

    return header


def read_header_position(filename: str) -> Optional[np.ndarray]:
    """Approximate station position (m) declared in an observation header"""
    return read_obs_header(filename)['approx_position']


def eph_to_model(eph) -> Optional[NavigationModel]:
    """Wrap one cssrlib ``Eph`` record, None if its satellite is unsupported"""
    sat_id = cssr_sat2id(eph.sat)
    sat = id2sat(sat_id) if sat_id else 0
    if sat == 0:
        logger.error(f"{sat_id or eph.sat} - unsupported satellite, ephemeris skipped")
        return None
    return NavigationModel(sat=sat, toc=gtime_to_seconds(eph.toc),
                           toe=gtime_to_seconds(eph.toe), ephemeris=eph)


def navigation_models(nav: Nav) -> Iterator[NavigationModel]:
    """Keplerian navigation models of a decoded file, ordered by toe

    GLONASS records (state vectors, not Keplerian elements) are skipped.
    """
    glonass = len(getattr(nav, 'geph', None) or [])
    if glonass:
        logger.info(f"{glonass} GLONASS ephemeris record(s) skipped")

    models = [m for m in (eph_to_model(eph) for eph in nav.eph) if m is not None]
    models.sort(key=lambda m: m.toe)
    logger.debug(f"{len(models)} navigation model(s) ready")
    return iter(models)


def signal_observations(epochs: Iterable) -> Iterator[SignalObservation]:
    """Flatten cssrlib Obs epochs into signal samples

    Missing measurements (zero or NaN) are not emitted.
    """
    for obs in epochs:
        t = gtime_to_seconds(obs.t)
        for i, cssr_sat in enumerate(obs.sat):
            sat_id = cssr_sat2id(cssr_sat)
            sat = id2sat(sat_id) if sat_id else 0
            if sat == 0:
                logger.debug(f"{t:.3f} - unsupported satellite {sat_id or cssr_sat}, skipped")
                continue

            sys, _ = sat2prn(cssr_sat)
            signals = obs.sig.get(sys, {})
            seen = set()
            for typ, attr in _OBS_ARRAYS.items():
                values = getattr(obs, attr, None)
                if values is None:
                    continue
                for j, sig in enumerate(signals.get(typ, [])):
                    code = sig.str()
                    if code in seen or j >= values.shape[1]:
                        continue
                    seen.add(code)
                    value = float(values[i, j])
                    if value == 0.0 or not math.isfinite(value):
                        continue
                    yield SignalObservation(t, sat, code, value)


class RinexNavReader:
    """Navigation file as a stream of navigation models."""

    def __init__(self, filename: str):
        self.filename = Path(filename)

    def read(self) -> Nav:
        return read_nav(str(self.filename))

    def models(self) -> Iterator[NavigationModel]:
        return navigation_models(self.read())


class RinexObsReader:
    """Observation file as a stream of signal samples."""

    def __init__(self, filename: str, signal_codes: List[str] | None = None):
        self.filename = Path(filename)
        self.signal_codes = signal_codes

    def read(self) -> List:
        return read_obs(str(self.filename), self.signal_codes)

    def header(self) -> dict:
        return read_obs_header(str(self.filename))

    def samples(self) -> Iterator[SignalObservation]:
        return signal_observations(self.read())
