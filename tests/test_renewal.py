import unittest

import numpy as np
from numpy.testing import assert_array_equal

from epicourse.renewal import RenewalParams, simulate_incidence


class Renewal(unittest.TestCase):
    W = [0.0, 0.5, 0.5]

    def test_seeding_days_are_copied(self):
        cases = simulate_incidence(RenewalParams(r=2.0, si_distr=self.W, initial_cases=[4, 6], n_days=5),
                                   stochastic=False)
        # day 2: 2 * (0.5*6 + 0.5*4) = 10, day 3: 2 * (0.5*10 + 0.5*6) = 16
        assert_array_equal(cases, [4, 6, 10, 16, 26])
        self.assertEqual(cases.dtype, np.int64)

    def test_per_day_r(self):
        r = [1.0, 1.0, 0.0, 0.0, 1.0]
        cases = simulate_incidence(RenewalParams(r=r, si_distr=self.W, initial_cases=[10, 10], n_days=5),
                                   stochastic=False)
        assert_array_equal(cases, [10, 10, 0, 0, 0])

    def test_seed_reproducible(self):
        params = RenewalParams(r=1.5, si_distr=self.W, initial_cases=[20], n_days=30)
        a = simulate_incidence(params, seed=11)
        b = simulate_incidence(params, seed=11)
        assert_array_equal(a, b)
        self.assertTrue(np.all(a >= 0))

    def test_invalid(self):
        bad = [
            dict(r=1.0, si_distr=[1.0], initial_cases=[1], n_days=5),
            dict(r=1.0, si_distr=[0.5, 0.0], initial_cases=[1], n_days=5),
            dict(r=1.0, si_distr=self.W, initial_cases=[], n_days=5),
            dict(r=1.0, si_distr=self.W, initial_cases=[1, 1, 1], n_days=2),
            dict(r=[1.0, 1.0], si_distr=self.W, initial_cases=[1], n_days=5),
            dict(r=-1.0, si_distr=self.W, initial_cases=[1], n_days=5),
        ]
        for kwargs in bad:
            with self.subTest(**kwargs):
                with self.assertRaises(ValueError):
                    RenewalParams(**kwargs)


if __name__ == "__main__":
    unittest.main()
