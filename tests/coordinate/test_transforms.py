import unittest

import numpy as np

from pypvt.coordinate import (
    ecef2eci, ecef2eci_dcm, ecef2enu, eci2ecef, eci2ecef_dcm, ecef2llh, llh2ecef, satellite_azel
)
from pypvt.core.constants import OMGE, RE_WGS84


class TestCoordinateTransforms(unittest.TestCase):

    def setUp(self):
        # Test points
        self.tokyo_llh = np.array([np.radians(35.6762), np.radians(139.6503), 40.0])
        self.newyork_llh = np.array([np.radians(40.7128), np.radians(-74.0060), 10.0])
        self.equator_llh = np.array([0.0, 0.0, 0.0])
        self.pole_llh = np.array([np.radians(90.0), 0.0, 0.0])

    def test_llh2ecef_ecef2llh_round_trip(self):
        test_points = [
            self.tokyo_llh,
            self.newyork_llh,
            self.equator_llh,
            np.array([np.radians(-35.0), np.radians(150.0), 100.0]),  # Southern hemisphere
            np.array([np.radians(55.0), np.radians(10.0), 20200e3]),  # GPS orbit altitude
        ]

        for llh in test_points:
            llh_back = ecef2llh(llh2ecef(llh))
            np.testing.assert_allclose(llh_back[:2], llh[:2], atol=1e-10)
            self.assertAlmostEqual(llh_back[2], llh[2], delta=1e-4)

    def test_equator(self):
        np.testing.assert_allclose(llh2ecef(self.equator_llh), [RE_WGS84, 0.0, 0.0], atol=1e-6)

    def test_pole(self):
        xyz = llh2ecef(self.pole_llh)
        llh = ecef2llh(np.array([0.0, 0.0, xyz[2]]))
        self.assertAlmostEqual(llh[0], np.pi / 2)
        self.assertAlmostEqual(llh[2], 0.0, delta=1e-6)

    def test_earth_center(self):
        np.testing.assert_array_equal(ecef2llh(np.zeros(3)), [0.0, 0.0, -RE_WGS84])

    def test_enu_offset(self):
        origin = self.tokyo_llh
        up = origin + np.array([0.0, 0.0, 100.0])
        np.testing.assert_allclose(ecef2enu(llh2ecef(up), origin), [0.0, 0.0, 100.0], atol=1e-6)


class TestSatelliteAzel(unittest.TestCase):

    def setUp(self):
        self.rx_llh = np.array([np.radians(35.0), np.radians(139.0), 50.0])
        self.rx = llh2ecef(self.rx_llh)

    def test_zenith(self):
        sat = llh2ecef(self.rx_llh + np.array([0.0, 0.0, 20000e3]))
        _, el = satellite_azel(sat, self.rx)
        self.assertAlmostEqual(el, np.pi / 2, places=6)

    def test_north_horizon(self):
        north = self.rx_llh + np.array([np.radians(1e-3), 0.0, 0.0])
        az, el = satellite_azel(llh2ecef(north), self.rx)
        self.assertTrue(az < 1e-3 or az > 2 * np.pi - 1e-3)
        self.assertLess(abs(el), 1e-3)

    def test_below_horizon(self):
        _, el = satellite_azel(-self.rx, self.rx)
        self.assertAlmostEqual(el, -np.pi / 2, delta=0.01)

    def test_receiver_at_earth_center(self):
        self.assertEqual(satellite_azel(np.array([2.6e7, 0.0, 0.0]), np.zeros(3)), (0.0, np.pi / 2))


class TestInertialFrame(unittest.TestCase):

    def test_rotation_angle(self):
        t = 3600.0
        C = ecef2eci_dcm(t)
        np.testing.assert_allclose(C @ [1.0, 0.0, 0.0], [np.cos(OMGE * t), np.sin(OMGE * t), 0.0])
        np.testing.assert_allclose(eci2ecef_dcm(t) @ C, np.eye(3), atol=1e-15)

    def test_round_trip(self):
        t = 1.4e9
        r = np.array([2.0e7, -1.2e7, 1.5e7])
        v = np.array([1200.0, 2500.0, -300.0])
        r_eci, v_eci = ecef2eci(t, r, v)
        r_back, v_back = eci2ecef(t, r_eci, v_eci)
        np.testing.assert_allclose(r_back, r, atol=1e-6)
        np.testing.assert_allclose(v_back, v, atol=1e-9)
        self.assertAlmostEqual(np.linalg.norm(r_eci), np.linalg.norm(r), delta=1e-6)

    def test_earth_rate_transport(self):
        """A point fixed on the equator moves at omega * a in the inertial frame"""
        _, v_eci = ecef2eci(0.0, [RE_WGS84, 0.0, 0.0], np.zeros(3))
        np.testing.assert_allclose(v_eci, [0.0, OMGE * RE_WGS84, 0.0])

    def test_position_only(self):
        _, v = ecef2eci(10.0, [1.0, 2.0, 3.0])
        self.assertIsNone(v)


if __name__ == '__main__':
    unittest.main()
