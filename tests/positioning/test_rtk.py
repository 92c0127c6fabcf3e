#!/usr/bin/env python3
"""Test suite for the RTK base station buffer"""

import unittest
from types import SimpleNamespace

import numpy as np

from pypvt.core.data_structures import Carrier, SignalObservation
from pypvt.core.errors import ConfigurationError
from pypvt.core.satellite import id2sat
from pypvt.positioning.rtk import BaseStationBuffer

G01 = id2sat('G01')
G02 = id2sat('G02')
BASE_ECEF = [4027893.6, 307045.6, 4919475.0]


def stream(*times):
    return [SignalObservation(t, G01 if i % 2 == 0 else G02, 'C1C', 2.0e7 + i)
            for i, t in enumerate(times)]


class TestConstruction(unittest.TestCase):
    """Test reference position handling"""

    def test_position_mandatory(self):
        with self.assertRaises(ConfigurationError):
            BaseStationBuffer([], None)

    def test_invalid_position(self):
        with self.assertRaises(ConfigurationError):
            BaseStationBuffer([], [1.0, 2.0])
        with self.assertRaises(ConfigurationError):
            BaseStationBuffer([], [1.0, float('nan'), 3.0])

    def test_reference_position_is_static(self):
        base = BaseStationBuffer([], BASE_ECEF)
        position = base.reference_position_ecef_m(0.0)
        position[0] = 0.0
        np.testing.assert_array_equal(base.reference_position_ecef_m(1e9), BASE_ECEF)

    def test_from_header_mapping(self):
        header = {'approx_position': BASE_ECEF, 'marker_name': 'MLVL'}
        base = BaseStationBuffer.from_header(header, [])
        self.assertEqual(base.name, 'MLVL')
        np.testing.assert_array_equal(base.reference_position_ecef_m(), BASE_ECEF)

    def test_from_header_prefers_rx_position(self):
        header = SimpleNamespace(rx_position=[1.0, 2.0, 3.0], approx_position=BASE_ECEF)
        base = BaseStationBuffer.from_header(header, [])
        self.assertEqual(base.name, 'Base')
        np.testing.assert_array_equal(base.reference_position_ecef_m(), [1.0, 2.0, 3.0])

    def test_from_header_without_position(self):
        with self.assertRaises(ConfigurationError):
            BaseStationBuffer.from_header({'marker_name': 'MLVL'}, [])
        with self.assertRaises(ConfigurationError):
            BaseStationBuffer.from_header(None, [])


class TestEpochs(unittest.TestCase):
    """Test buffering in step with the rover"""

    def test_buffers_through_next_epoch(self):
        base = BaseStationBuffer(stream(0.0, 0.0, 1.0, 1.0, 2.0), BASE_ECEF)

        base.new_epoch(0.0)
        self.assertEqual(len(base), 3)
        candidates = base.observe(0.0)
        self.assertEqual([c.sat for c in candidates], [G01, G02])
        self.assertEqual(candidates[0].pseudo_range(Carrier.L1), 2.0e7)

        base.new_epoch(1.0)
        self.assertEqual(len(base), 3)
        self.assertEqual([c.pseudo_range(Carrier.L1) for c in base.observe(1.0)], [2.0e7 + 2, 2.0e7 + 3])
        self.assertFalse(base.is_exhausted)

        base.new_epoch(5.0)
        self.assertEqual(len(base), 0)
        self.assertTrue(base.is_exhausted)
        self.assertEqual(base.observe(5.0), [])

    def test_new_epoch_is_idempotent(self):
        base = BaseStationBuffer(stream(0.0, 1.0, 2.0), BASE_ECEF)
        base.new_epoch(0.0)
        base.new_epoch(0.0)
        self.assertEqual(len(base), 2)

    def test_stale_samples_skipped(self):
        base = BaseStationBuffer(stream(0.0, 1.0, 2.0, 3.0), BASE_ECEF)
        base.new_epoch(1.5)
        self.assertEqual(len(base), 1)
        self.assertEqual(base.observe(1.0), [])
        self.assertEqual(len(base.observe(2.0)), 1)

    def test_pending_epoch_kept(self):
        base = BaseStationBuffer(stream(0.0, 0.0, 30.0, 30.0, 60.0), BASE_ECEF)
        base.new_epoch(0.0)
        base.new_epoch(30.0, keep_from=0.0)
        self.assertEqual(len(base.observe(0.0)), 2)
        self.assertEqual(len(base.observe(30.0)), 2)

        base.new_epoch(60.0, keep_from=30.0)
        self.assertEqual(base.observe(0.0), [])
        self.assertEqual(len(base.observe(30.0)), 2)
        self.assertEqual(len(base.observe(60.0)), 1)

    def test_observe_skips_unknown_carriers(self):
        samples = [
            SignalObservation(0.0, G01, 'C1C', 2.0e7),
            SignalObservation(0.0, G01, 'C6C', 2.0e7),
            SignalObservation(0.0, G02, 'X1C', 2.0e7),
        ]
        base = BaseStationBuffer(samples, BASE_ECEF)
        base.new_epoch(0.0)
        candidates = base.observe(0.0)
        self.assertEqual(len(candidates), 1)
        self.assertEqual(candidates[0].carriers, [Carrier.L1])


if __name__ == '__main__':
    unittest.main()
