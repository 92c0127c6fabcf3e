#!/usr/bin/env python3
"""Test suite for the solutions table"""

import unittest

import numpy as np

from pypvt.coordinate.transforms import llh2ecef
from pypvt.core.constants import D2R, SOLQ_FLOAT, SOLQ_SINGLE
from pypvt.core.data_structures import PVTSolution
from pypvt.positioning.post_process import COLUMNS, solutions_dataframe


def solution(t, lat_deg=45.0, lon_deg=5.0, h=100.0, **kwargs):
    rr = llh2ecef(np.array([lat_deg * D2R, lon_deg * D2R, h]))
    return PVTSolution(time=t, rr=rr, **kwargs)


class TestSolutionsDataframe(unittest.TestCase):
    """Test the DataFrame conversion"""

    def test_empty(self):
        df = solutions_dataframe({})
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), COLUMNS)
        self.assertEqual(df.index.name, 'time')

    def test_rows_from_mapping(self):
        solutions = {
            20.0: solution(20.0, type=SOLQ_FLOAT, ns=9, dtr=1e-7),
            10.0: solution(10.0, lat_deg=-33.0, type=SOLQ_SINGLE, ns=7),
        }
        df = solutions_dataframe(solutions)

        self.assertEqual(list(df.index), [10.0, 20.0])
        self.assertEqual(list(df.columns), COLUMNS)
        self.assertAlmostEqual(df.loc[10.0, 'lat_deg'], -33.0, places=8)
        self.assertAlmostEqual(df.loc[20.0, 'lon_deg'], 5.0, places=8)
        self.assertAlmostEqual(df.loc[20.0, 'height_m'], 100.0, places=3)
        self.assertEqual(df.loc[20.0, 'num_sats'], 9)
        self.assertEqual(df.loc[10.0, 'solution_type'], SOLQ_SINGLE)
        self.assertEqual(df.loc[20.0, 'clock_offset_s'], 1e-7)

    def test_rows_from_list(self):
        df = solutions_dataframe([solution(5.0), solution(1.0)])
        self.assertEqual(list(df.index), [1.0, 5.0])
        np.testing.assert_allclose(df[['vx_m_s', 'vy_m_s', 'vz_m_s']].to_numpy(), 0.0)


if __name__ == '__main__':
    unittest.main()
