#!/usr/bin/env python3
"""Test suite for the time correction service"""

import unittest

from pypvt.core.constants import WEEK_SECONDS
from pypvt.core.time import GNSSTime
from pypvt.core.time_corrections import CorrectionDatabase, TimeCorrection, TimeCorrectionService


def gps_to_utc(week=2300, tow=0.0, a0=-18.0000001, a1=0.0):
    return TimeCorrection('GPS', 'UTC', GNSSTime(week, tow, 'GPS'), a0, a1)


class TestCoarseService(unittest.TestCase):
    """Without database the service is the generic conversion"""

    def test_equals_generic_conversion(self):
        service = TimeCorrectionService()
        self.assertFalse(service.has_database)
        for t in (GNSSTime(2300, 0.0), GNSSTime(2100, 345600.5, 'GAL'), GNSSTime(1, 1.0, 'BDS')):
            for target in ('GPS', 'GAL', 'BDS', 'GLO', 'UTC'):
                self.assertEqual(service.epoch_correction(t, target), t.convert_to(target))

    def test_accepts_gps_seconds(self):
        service = TimeCorrectionService()
        t = 2300 * WEEK_SECONDS + 50.0
        self.assertEqual(service.epoch_correction(t, 'UTC'),
                         GNSSTime.from_gps_seconds(t).convert_to('UTC'))

    def test_new_epoch_without_database(self):
        service = TimeCorrectionService()
        service.new_epoch(GNSSTime(2300, 0.0))
        self.assertFalse(service.has_database)


class TestCorrectionDatabase(unittest.TestCase):
    """Test precise corrections and weekly expiry"""

    def test_precise_correction(self):
        db = CorrectionDatabase([gps_to_utc(a0=-18.0000001, a1=1e-9)])
        t = GNSSTime(2300, 100.0)
        corrected = db.precise_epoch_correction(t, 'UTC')
        self.assertEqual(corrected.time_sys, 'UTC')
        self.assertEqual(corrected.week, 2300)
        self.assertAlmostEqual(corrected.tow, 100.0 - 18.0000001 + 1e-9 * 100.0, delta=1e-6)

    def test_no_matching_pair(self):
        db = CorrectionDatabase([gps_to_utc()])
        self.assertIsNone(db.precise_epoch_correction(GNSSTime(2300, 100.0), 'BDS'))
        self.assertIsNone(db.precise_epoch_correction(GNSSTime(2300, 100.0, 'GAL'), 'UTC'))

    def test_stale_correction_not_applied(self):
        db = CorrectionDatabase([gps_to_utc(week=2300)])
        self.assertIsNone(db.precise_epoch_correction(GNSSTime(2302, 0.0), 'UTC'))

    def test_most_recent_wins(self):
        db = CorrectionDatabase([gps_to_utc(tow=0.0, a0=-18.0), gps_to_utc(tow=3600.0, a0=-18.5)])
        corrected = db.precise_epoch_correction(GNSSTime(2300, 7200.0), 'UTC')
        self.assertAlmostEqual(corrected.tow, 7200.0 - 18.5)

    def test_reference_must_be_in_lhs(self):
        db = CorrectionDatabase()
        with self.assertRaises(ValueError):
            db.add(TimeCorrection('GPS', 'UTC', GNSSTime(2300, 0.0, 'UTC'), -18.0))

    def test_outdate_weekly(self):
        db = CorrectionDatabase([gps_to_utc(week=2300), gps_to_utc(week=2301)])
        db.outdate_weekly(GNSSTime(2301, 0.0))
        self.assertEqual(len(db), 2)

        db.outdate_weekly(GNSSTime(2301, 1.0))
        self.assertEqual(len(db), 1)
        self.assertEqual(next(iter(db)).reference.week, 2301)


class TestPreciseService(unittest.TestCase):
    """Test the service with a database"""

    def test_precise_then_fallback(self):
        service = TimeCorrectionService(CorrectionDatabase([gps_to_utc(a0=-18.25)]))
        self.assertTrue(service.has_database)

        t = GNSSTime(2300, 1000.0)
        self.assertAlmostEqual(service.epoch_correction(t, 'UTC').tow, 1000.0 - 18.25)
        self.assertEqual(service.epoch_correction(t, 'BDS'), t.convert_to('BDS'))

    def test_new_epoch_expires_entries(self):
        service = TimeCorrectionService(CorrectionDatabase([gps_to_utc(week=2300)]))
        service.new_epoch(GNSSTime(2302, 0.0))
        self.assertEqual(len(service.database), 0)
        self.assertTrue(service.has_database)

        t = GNSSTime(2302, 10.0)
        self.assertEqual(service.epoch_correction(t, 'UTC'), t.convert_to('UTC'))

    def test_new_epoch_keeps_entries_of_pending_epoch(self):
        service = TimeCorrectionService(CorrectionDatabase([gps_to_utc(week=2300)]))
        service.new_epoch(GNSSTime(2301, 100.0), keep_from=GNSSTime(2300, 604700.0))
        self.assertEqual(len(service.database), 1)

        service.new_epoch(GNSSTime(2301, 100.0))
        self.assertEqual(len(service.database), 0)


if __name__ == '__main__':
    unittest.main()
