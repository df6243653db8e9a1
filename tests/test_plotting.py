import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from casedata.incidence import to_daily_index  # noqa: E402
from epicourse.experiments import compare_scenarios, grid_sweep  # noqa: E402
from epicourse.rt import RtConfig, estimate_rt  # noqa: E402
from epicourse.sir import run_sir_model  # noqa: E402
from epicourse.utils.plotting import (  # noqa: E402
    plot_incidence_and_rt,
    plot_infected_comparison,
    plot_rt,
    plot_sweep_heatmap,
    plot_trajectory,
)


class Figures(unittest.TestCase):
    def tearDown(self):
        plt.close("all")

    def test_trajectory(self):
        traj = run_sir_model(0.3, 0.1, (990, 10, 0), 100)
        ax = plot_trajectory(traj, show=False, title="demo")
        self.assertEqual(len(ax.get_lines()), 3)
        self.assertEqual(ax.get_title(), "demo")

    def test_comparison_and_heatmap(self):
        long = compare_scenarios({"a": (0.3, 0.1), "b": (0.2, 0.1)}, (990, 10, 0), 60)
        ax = plot_infected_comparison(long, show=False)
        self.assertGreaterEqual(len(ax.get_lines()), 2)

        sweep = grid_sweep([0.2, 0.3], [0.1, 0.2], (990, 10, 0), 60)
        ax = plot_sweep_heatmap(sweep, show=False)
        self.assertEqual(ax.get_xlabel(), "beta")

    def test_rt_with_degenerate_windows(self):
        incidence = np.array([0] * 5 + [30, 40, 50, 60, 70, 80, 90, 100, 110, 120, 130])
        with self.assertWarns(RuntimeWarning):
            table = estimate_rt(incidence, RtConfig(mean_si=4.8, std_si=2.3),
                                windows=[(1, 4), (2, 5), (6, 13), (8, 15)])
        ax = plot_rt(table, show=False, label="toy")
        legend = [t.get_text() for t in ax.get_legend().get_texts()]
        self.assertTrue(any("undefined" in text for text in legend))

    def test_incidence_and_rt(self):
        incidence = to_daily_index(np.full(40, 25), start="2021-01-01")
        table = estimate_rt(incidence, RtConfig(mean_si=4.8, std_si=2.3))
        fig = plot_incidence_and_rt(incidence, table, show=False)
        self.assertEqual(len(fig.axes), 2)


if __name__ == "__main__":
    unittest.main()
