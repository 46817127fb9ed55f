import unittest

from sidequest.config import DEFAULT_SETTINGS, OptimiserSettings, settings_from_env, settings_from_mapping
from sidequest.errors import InvalidInput
from sidequest.models import Anchor, OptimizationRequest, Point, Strategy


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(DEFAULT_SETTINGS.two_opt_epsilon, 1e-12)
        self.assertEqual(DEFAULT_SETTINGS.sa_iterations, 2500)
        self.assertEqual(DEFAULT_SETTINGS.sa_initial_temperature, 0.5)
        self.assertEqual(DEFAULT_SETTINGS.sa_cooling, 0.999)
        self.assertEqual(DEFAULT_SETTINGS.restart_trials, 40)
        self.assertIsNone(DEFAULT_SETTINGS.seed)

    def test_from_mapping(self):
        settings = settings_from_mapping(
            {"SA_ITERATIONS": "100", "SEED": "3", "LOG_LEVEL": "debug", "THEME": "dark"}
        )
        self.assertEqual(settings.sa_iterations, 100)
        self.assertEqual(settings.seed, 3)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.restart_trials, 40)

    def test_empty_seed(self):
        self.assertIsNone(settings_from_mapping({"SEED": ""}).seed)

    def test_from_env(self):
        settings = settings_from_env({"SIDEQUEST_SA_COOLING": "0.99", "SA_ITERATIONS": "5"})
        self.assertEqual(settings.sa_cooling, 0.99)
        self.assertEqual(settings.sa_iterations, 2500)

    def test_bad_value(self):
        with self.assertRaises(InvalidInput):
            settings_from_mapping({"RESTART_TRIALS": "many"})

    def test_out_of_range_values(self):
        for key, value in [
            ("SA_COOLING", "-1"),
            ("SA_COOLING", "1.5"),
            ("TWO_OPT_EPSILON", "nan"),
            ("SA_MIN_TEMPERATURE", "0"),
            ("SA_ITERATIONS", "-5"),
            ("RESTART_TRIALS", "-1"),
            ("NEARBY_LIMIT", "0"),
            ("LOG_LEVEL", "chatty"),
        ]:
            with self.subTest(key=key, value=value):
                with self.assertRaises(InvalidInput):
                    settings_from_mapping({key: value})

    def test_direct_construction_validated(self):
        with self.assertRaises(InvalidInput):
            OptimiserSettings(sa_cooling=0.0)


class TestRequest(unittest.TestCase):
    def test_points_become_tuple(self):
        request = OptimizationRequest([Point("a", 1.0, 2.0)])
        self.assertIsInstance(request.points, tuple)

    def test_non_finite_point(self):
        with self.assertRaises(InvalidInput):
            OptimizationRequest([Point("a", float("inf"), 2.0)])

    def test_non_finite_anchor(self):
        with self.assertRaises(InvalidInput):
            OptimizationRequest([Point("a", 1.0, 2.0)], anchor=Anchor(float("nan"), 0.0))

    def test_start_index_out_of_range(self):
        with self.assertRaises(InvalidInput):
            OptimizationRequest([Point("a", 1.0, 2.0)], start_index=1)

    def test_strategy_labels(self):
        self.assertEqual(Strategy("ga-lite"), Strategy.MULTI_START)
        self.assertEqual(Strategy.TWO_OPT.label, "Route (NN + 2-opt)")


if __name__ == "__main__":
    unittest.main()
