"""
Tests for redundant joint solutions.
"""

import math

import numpy as np

from waypoint_sampler.motion.redundancy import RedundancyExpander, get_redundant_solutions

TURN = 2 * math.pi


class TestGetRedundantSolutions:

    def test_both_directions_in_limits(self):
        limits = np.array([[-10.0, 10.0]])
        alternates = get_redundant_solutions(np.array([0.5]), 0, limits)
        np.testing.assert_allclose([a[0] for a in alternates], [0.5 + TURN, 0.5 - TURN])

    def test_out_of_limit_alternates_excluded(self):
        limits = np.array([[-4.0, 4.0]])
        assert get_redundant_solutions(np.array([0.0]), 0, limits) == []

    def test_only_one_direction(self):
        limits = np.array([[-1.0, 7.0]])
        alternates = get_redundant_solutions(np.array([0.5]), 0, limits)
        assert len(alternates) == 1
        assert alternates[0][0] == 0.5 + TURN

    def test_custom_period(self):
        limits = np.array([[-2.0, 2.0]])
        alternates = get_redundant_solutions(np.array([0.5]), 0, limits, period=1.0)
        np.testing.assert_allclose([a[0] for a in alternates], [1.5, -0.5])

    def test_original_untouched(self):
        solution = np.array([0.5, 0.2])
        get_redundant_solutions(solution, 0, np.array([[-10.0, 10.0], [-1.0, 1.0]]))
        np.testing.assert_array_equal(solution, [0.5, 0.2])


class TestRedundancyExpander:

    def test_empty_set_passes_through(self):
        solutions = [np.array([0.0, 0.0]), np.array([1.0, 1.0])]
        expander = RedundancyExpander((), np.array([[-10.0, 10.0]] * 2), np.full(2, TURN))
        expanded = expander.expand(solutions)
        assert len(expanded) == 2
        assert expanded[0] is solutions[0]

    def test_order_original_plus_minus(self):
        limits = np.array([[-10.0, 10.0], [-10.0, 10.0]])
        expander = RedundancyExpander((1, 0), limits, np.full(2, TURN))

        expanded = expander.expand([np.array([0.1, 0.2])])

        expected = [
            [0.1, 0.2],
            [0.1, 0.2 + TURN],
            [0.1, 0.2 - TURN],
            [0.1 + TURN, 0.2],
            [0.1 - TURN, 0.2],
        ]
        np.testing.assert_allclose(np.array(expanded), expected)

    def test_not_combinatorial(self):
        limits = np.array([[-10.0, 10.0], [-10.0, 10.0]])
        expander = RedundancyExpander((0, 1), limits, np.full(2, TURN))

        expanded = expander.expand([np.zeros(2)])

        # Never both joints turned at once
        assert len(expanded) == 5
        assert all(np.count_nonzero(state) <= 1 for state in expanded)

    def test_alternates_keep_angle_modulo_turn(self):
        limits = np.array([[-10.0, 10.0], [-1.0, 1.0]])
        raw = np.array([1.3, 0.4])
        expander = RedundancyExpander((0,), limits, np.full(2, TURN))

        for state in expander.expand([raw]):
            assert math.isclose(state[0] % TURN, raw[0] % TURN, abs_tol=1e-9)
            assert limits[0, 0] <= state[0] <= limits[0, 1]
