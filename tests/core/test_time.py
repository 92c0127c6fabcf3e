#!/usr/bin/env python3
"""Test suite for GNSS time systems"""

import unittest
from datetime import datetime

from pypvt.core.constants import WEEK_SECONDS
from pypvt.core.time import GNSSTime, gps_seconds_to_week_tow, to_gnss_time


class TestGNSSTime(unittest.TestCase):
    """Test GNSSTime arithmetic and conversion"""

    def test_normalization(self):
        t = GNSSTime(2300, WEEK_SECONDS + 10.0)
        self.assertEqual(t.week, 2301)
        self.assertAlmostEqual(t.tow, 10.0)

        t = GNSSTime(2300, -10.0)
        self.assertEqual(t.week, 2299)
        self.assertAlmostEqual(t.tow, WEEK_SECONDS - 10.0)

    def test_invalid_system(self):
        with self.assertRaises(ValueError):
            GNSSTime(0, 0.0, 'TAI')

    def test_gps_seconds(self):
        t = GNSSTime.from_gps_seconds(2300 * WEEK_SECONDS + 86400.0)
        self.assertEqual(t.week, 2300)
        self.assertAlmostEqual(t.tow, 86400.0)
        self.assertAlmostEqual(t.to_gps_seconds(), 2300 * WEEK_SECONDS + 86400.0)

    def test_datetime(self):
        t = GNSSTime.from_datetime(datetime(1980, 1, 13, 0, 0, 30))
        self.assertEqual(t.week, 1)
        self.assertAlmostEqual(t.tow, 30.0)
        self.assertEqual(t.to_datetime(), datetime(1980, 1, 13, 0, 0, 30))

    def test_arithmetic(self):
        t = GNSSTime(2300, 100.0)
        self.assertAlmostEqual((t + 50.0) - t, 50.0)
        self.assertEqual((t - 200.0).week, 2299)
        self.assertLess(t, t + 1.0)
        self.assertEqual(t, GNSSTime(2300, 100.0))
        self.assertEqual(hash(t), hash(GNSSTime(2300, 100.0)))

    def test_mixed_systems_rejected(self):
        with self.assertRaises(ValueError):
            GNSSTime(2300, 0.0, 'GPS') - GNSSTime(2300, 0.0, 'UTC')
        with self.assertRaises(ValueError):
            GNSSTime(2300, 0.0, 'GPS') < GNSSTime(2300, 0.0, 'BDS')

    def test_generic_conversions(self):
        t = GNSSTime(2300, 1000.0, 'GPS')
        self.assertAlmostEqual(t.convert_to('UTC').tow, 1000.0 - 18.0)
        self.assertAlmostEqual(t.convert_to('BDS').tow, 1000.0 - 14.0)
        self.assertAlmostEqual(t.convert_to('GAL').tow, 1000.0)
        self.assertAlmostEqual(t.convert_to('GLO').tow, 1000.0 - 18.0 + 10800.0)
        self.assertEqual(t.convert_to('utc').time_sys, 'UTC')

    def test_conversion_is_reversible(self):
        t = GNSSTime(2300, 5.0, 'BDS')
        back = t.convert_to('GLO').convert_to('BDS')
        self.assertEqual(back, t)

    def test_conversion_to_same_system_copies(self):
        t = GNSSTime(2300, 5.0, 'GPS')
        c = t.convert_to('GPS')
        self.assertEqual(c, t)
        self.assertIsNot(c, t)

    def test_unknown_target(self):
        with self.assertRaises(ValueError):
            GNSSTime(2300, 5.0).convert_to('TAI')


class TestHelpers(unittest.TestCase):
    """Test module level helpers"""

    def test_week_tow(self):
        week, tow = gps_seconds_to_week_tow(2 * WEEK_SECONDS + 12.5)
        self.assertEqual(week, 2)
        self.assertAlmostEqual(tow, 12.5)
        with self.assertRaises(ValueError):
            gps_seconds_to_week_tow(-1.0)

    def test_to_gnss_time(self):
        t = GNSSTime(1, 2.0)
        self.assertIs(to_gnss_time(t), t)
        self.assertEqual(to_gnss_time(WEEK_SECONDS + 2.0), t)
        self.assertEqual(to_gnss_time(0.0, 'GAL').time_sys, 'GAL')


if __name__ == '__main__':
    unittest.main()
