#!/usr/bin/env python3
"""Test suite for the bias adapters"""

import unittest
from types import SimpleNamespace

import numpy as np

from pypvt.coordinate.transforms import llh2ecef
from pypvt.core.constants import WEEK_SECONDS
from pypvt.core.data_structures import ClockCorrection, NavigationModel
from pypvt.core.satellite import id2sat
from pypvt.gnss.biases import BiasRuntime, EnvironmentalBiases, SpacebornBiases
from pypvt.gnss.troposphere import TroposphereModel
from pypvt.satellite.ephemeris import EphemerisStore

G01 = id2sat('G01')
T0 = 2300 * WEEK_SECONDS
RX_LLH = np.array([np.radians(45.0), np.radians(5.0), 100.0])


def runtime(sat=G01, t=T0, elevation_deg=45.0, rx_ecef=None):
    rx = llh2ecef(RX_LLH) if rx_ecef is None else rx_ecef
    return BiasRuntime(t, sat, np.radians(elevation_deg), 0.0, rx)


def store_with(**fields):
    eph = SimpleNamespace(svh=0, fit=0, **fields)
    store = EphemerisStore([NavigationModel(G01, T0, T0, eph)])
    store.advance(T0)
    return store


class TestBiasRuntime(unittest.TestCase):
    """Test runtime parameters"""

    def test_llh_derived_from_ecef(self):
        rtm = runtime()
        np.testing.assert_allclose(rtm.rx_llh, RX_LLH, atol=1e-6)

    def test_explicit_llh_kept(self):
        rtm = BiasRuntime(T0, G01, 0.5, 0.0, np.zeros(3), rx_llh=[0.1, 0.2, 3.0])
        np.testing.assert_allclose(rtm.rx_llh, [0.1, 0.2, 3.0])


class TestSpacebornBiases(unittest.TestCase):
    """Test clock and group delay"""

    def test_clock_bias(self):
        biases = SpacebornBiases(store_with(f0=1e-5, f1=0.0, f2=0.0))
        corr = biases.clock_bias(runtime(t=T0 + 60.0))
        self.assertAlmostEqual(corr.duration, 1e-5)
        self.assertTrue(corr.needs_relativistic_correction)

    def test_clock_bias_without_model(self):
        biases = SpacebornBiases(store_with(f0=1e-5))
        with self.assertLogs('pypvt.gnss.biases', level='DEBUG'):
            corr = biases.clock_bias(runtime(sat=id2sat('G02')))
        self.assertEqual(corr, ClockCorrection())

    def test_group_delay(self):
        biases = SpacebornBiases(store_with(tgd=[-6.0e-9, 0.0]))
        self.assertEqual(biases.group_delay(runtime()), -6.0e-9)
        self.assertEqual(biases.group_delay(runtime(sat=id2sat('G09'))), 0.0)

    def test_group_delay_not_published(self):
        biases = SpacebornBiases(store_with(f0=0.0))
        self.assertEqual(biases.group_delay(runtime()), 0.0)

    def test_mw_bias(self):
        biases = SpacebornBiases(store_with())
        self.assertEqual(biases.mw_bias(runtime()), 0.0)

    def test_never_fails(self):
        biases = SpacebornBiases(store_with(f0=1e-5, tgd=1e-9))
        for sat in (G01, id2sat('E01'), id2sat('S20'), id2sat('C10')):
            for t in (T0 - 1e5, T0, T0 + 1e5):
                rtm = runtime(sat=sat, t=t)
                self.assertIsInstance(biases.clock_bias(rtm), ClockCorrection)
                self.assertIsInstance(biases.group_delay(rtm), float)
                self.assertEqual(biases.mw_bias(rtm), 0.0)


class TestEnvironmentalBiases(unittest.TestCase):
    """Test atmospheric delays"""

    def setUp(self):
        self.biases = EnvironmentalBiases()

    def test_default_model(self):
        self.assertEqual(self.biases.troposphere, TroposphereModel.NIELL)

    def test_ionosphere(self):
        self.assertEqual(self.biases.ionosphere_bias_m(runtime()), 0.0)

    def test_troposphere_zenith(self):
        delay = self.biases.troposphere_bias_m(runtime(elevation_deg=90.0))
        self.assertGreater(delay, 2.2)
        self.assertLess(delay, 2.6)

    def test_troposphere_grows_at_low_elevation(self):
        zenith = self.biases.troposphere_bias_m(runtime(elevation_deg=90.0))
        low = self.biases.troposphere_bias_m(runtime(elevation_deg=10.0))
        self.assertGreater(low, 5.0 * zenith)

    def test_below_horizon(self):
        self.assertEqual(self.biases.troposphere_bias_m(runtime(elevation_deg=0.0)), 0.0)
        self.assertEqual(self.biases.troposphere_bias_m(runtime(elevation_deg=-5.0)), 0.0)
        rtm = runtime()
        rtm.elevation_rad = float('nan')
        self.assertEqual(self.biases.troposphere_bias_m(rtm), 0.0)

    def test_degenerate_receiver(self):
        """A receiver at the Earth center gets no tropospheric delay"""
        rtm = runtime(rx_ecef=np.zeros(3))
        self.assertEqual(self.biases.troposphere_bias_m(rtm), 0.0)


if __name__ == '__main__':
    unittest.main()
