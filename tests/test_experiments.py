import unittest

import numpy as np

from epicourse.experiments import compare_scenarios, grid_sweep, pivot_for_plot

INITIAL = (9990, 10, 0)


class Sweeps(unittest.TestCase):
    def test_grid_sweep(self):
        betas = [0.2, 0.4, 0.6]
        gammas = [0.1, 0.2]
        df = grid_sweep(betas, gammas, INITIAL, horizon=200)

        self.assertEqual(len(df), 6)
        for col in ("beta", "gamma", "R0", "peak_day", "peak_infected", "final_size"):
            self.assertIn(col, df.columns)
        self.assertTrue(df["beta"].is_monotonic_increasing)
        np.testing.assert_allclose(df["R0"].to_numpy(), df["beta"].to_numpy() / df["gamma"].to_numpy())

        # final size grows with R0
        ordered = df.sort_values("R0")
        self.assertGreater(ordered["final_size"].iloc[-1], ordered["final_size"].iloc[0])

    def test_pivot(self):
        df = grid_sweep([0.2, 0.4, 0.6], [0.1, 0.2], INITIAL, horizon=50)
        X, Y, Z = pivot_for_plot(df, x="beta", y="gamma", value="final_size")
        self.assertEqual(Z.shape, (2, 3))
        np.testing.assert_allclose(X[0], [0.2, 0.4, 0.6])
        np.testing.assert_allclose(Y[:, 0], [0.1, 0.2])

    def test_compare_scenarios(self):
        long = compare_scenarios({"fast": (0.5, 0.1), "slow": (0.15, 0.1)}, INITIAL, horizon=100)
        self.assertEqual(len(long), 2 * 101)
        self.assertEqual(sorted(long["scenario"].unique()), ["fast", "slow"])
        peaks = long.groupby("scenario")["I"].max()
        self.assertGreater(peaks["fast"], peaks["slow"])

    def test_compare_no_scenarios(self):
        with self.assertRaises(ValueError):
            compare_scenarios({}, INITIAL, horizon=10)


if __name__ == "__main__":
    unittest.main()
