import unittest

import numpy as np
from numpy.testing import assert_allclose

from epicourse.serial_interval import discretize_serial_interval, serial_interval_moments


class Discretization(unittest.TestCase):
    def test_weights_form_a_pmf(self):
        for mean, std in [(4.8, 2.3), (7.0, 4.75), (2.6, 1.5)]:
            with self.subTest(mean=mean, std=std):
                w = discretize_serial_interval(mean, std, 60)
                self.assertEqual(w.size, 61)
                self.assertEqual(w[0], 0.0)
                self.assertTrue(np.all(w >= 0))
                assert_allclose(w.sum(), 1.0)

    def test_moments_follow_inputs(self):
        w = discretize_serial_interval(4.8, 2.3, 60)
        mean, std = serial_interval_moments(w)
        self.assertAlmostEqual(mean, 4.8, delta=0.05)
        self.assertAlmostEqual(std, 2.3, delta=0.3)

    def test_longer_interval_shifts_mass_later(self):
        short = discretize_serial_interval(4.8, 2.3, 60)
        longer = discretize_serial_interval(7.0, 4.75, 60)
        self.assertGreater(serial_interval_moments(longer)[0], serial_interval_moments(short)[0])
        self.assertGreater(longer[15:].sum(), short[15:].sum())

    def test_truncation_renormalizes(self):
        w = discretize_serial_interval(7.0, 4.75, 5)
        assert_allclose(w.sum(), 1.0)
        self.assertEqual(w.size, 6)

    def test_invalid_inputs(self):
        # a 1-day mean leaves nothing to offset
        for mean, std, max_days in [(1.0, 1.0, 30), (0.5, 1.0, 30), (4.8, 0.0, 30), (4.8, 2.3, 0)]:
            with self.subTest(mean=mean, std=std, max_days=max_days):
                with self.assertRaises(ValueError):
                    discretize_serial_interval(mean, std, max_days)


if __name__ == "__main__":
    unittest.main()
