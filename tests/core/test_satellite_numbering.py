#!/usr/bin/env python3
"""Test suite for unified satellite numbering"""

import unittest

from pypvt.core.constants import (
    SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_IRN, SYS_NONE, SYS_QZS, SYS_SBS,
    sat2prn, sat2sys
)
from pypvt.core.satellite import id2sat, sat2id


class TestSatelliteIds(unittest.TestCase):
    """Test RINEX identifier conversion"""

    def test_first_satellite_of_each_system(self):
        self.assertEqual(id2sat('G01'), 1)
        self.assertEqual(id2sat('R01'), 65)
        self.assertEqual(id2sat('E01'), 97)
        self.assertEqual(id2sat('C01'), 141)
        self.assertEqual(id2sat('J01'), 210)
        self.assertEqual(id2sat('I01'), 230)

    def test_sbas(self):
        self.assertEqual(id2sat('S20'), 33)
        self.assertEqual(id2sat('S120'), 33)
        self.assertEqual(id2sat('S58'), 139)
        self.assertEqual(sat2id(33), 'S20')

    def test_back_and_forth(self):
        for sat_id in ('G32', 'R24', 'E36', 'C63', 'J07', 'I14', 'S23'):
            self.assertEqual(sat2id(id2sat(sat_id)), sat_id)

    def test_invalid(self):
        self.assertEqual(id2sat('X01'), 0)
        self.assertEqual(id2sat('G'), 0)
        self.assertEqual(id2sat('G33'), 0)
        self.assertEqual(sat2id(0), '')
        self.assertEqual(sat2id(90), '')


class TestSystems(unittest.TestCase):
    """Test system lookup"""

    def test_sat2sys(self):
        self.assertEqual(sat2sys(1), SYS_GPS)
        self.assertEqual(sat2sys(33), SYS_SBS)
        self.assertEqual(sat2sys(135), SYS_SBS)
        self.assertEqual(sat2sys(70), SYS_GLO)
        self.assertEqual(sat2sys(100), SYS_GAL)
        self.assertEqual(sat2sys(150), SYS_BDS)
        self.assertEqual(sat2sys(211), SYS_QZS)
        self.assertEqual(sat2sys(231), SYS_IRN)
        self.assertEqual(sat2sys(0), SYS_NONE)
        self.assertEqual(sat2sys(90), SYS_NONE)

    def test_prn(self):
        self.assertEqual(sat2prn(id2sat('E05')), 5)
        self.assertEqual(sat2prn(id2sat('C19')), 19)


if __name__ == '__main__':
    unittest.main()
