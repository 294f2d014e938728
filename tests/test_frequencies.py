import unittest

from harmonicexplorer.model.exceptions import ValidationError
from harmonicexplorer.model.frequencies import EvaluationResult, Frequency, ImportantFrequency, rank_results


def important(hertz_value, id="ref"):
    return ImportantFrequency(
        id=id, source="test", category="Category", type="Type", emojis="*", frequency=Frequency(hertz_value)
    )


class TestFrequency(unittest.TestCase):
    def test_positive_only(self):
        for value in (0.0, -1.0):
            with self.assertRaises(ValidationError):
                Frequency(value)

    def test_octaves_above(self):
        frequency = Frequency(10.5)
        octaves = frequency.octaves_above(6)
        self.assertEqual(len(octaves), 6)
        for i, value in enumerate(octaves):
            self.assertEqual(value, 10.5 * 2 ** i)

    def test_octaves_exclusive(self):
        octaves = Frequency(100.0).octaves_below(3, inclusive=False)
        self.assertEqual(list(octaves), [50.0, 25.0])

    def test_color(self):
        self.assertRegex(Frequency(440.0).hex_color, r"^#[0-9A-F]{6}$")


class TestEvaluateAgainst(unittest.TestCase):
    def test_exact_octave_is_perfect(self):
        result = Frequency(440.0).evaluate_against(Frequency(110.0), 0.000001)
        self.assertIsNotNone(result)
        self.assertTrue(result.perfect)
        self.assertEqual(result.match_percentage, 0.0)

    def test_searches_down_from_higher(self):
        result = Frequency(110.0).evaluate_against(Frequency(880.0), 0.000001)
        self.assertTrue(result.perfect)

    def test_tolerance(self):
        target = Frequency(100.0)
        candidate = Frequency(52.5)  # closest octave is 105, ratio 1.05
        self.assertIsNone(target.evaluate_against(candidate, 3.0))
        result = target.evaluate_against(candidate, 6.0)
        self.assertAlmostEqual(result.ratio, 1.05)
        self.assertFalse(result.perfect)

    def test_first_match_wins(self):
        """
        With a tolerance wide enough for two octaves the first generated one
        is returned, not the closest.
        """
        result = Frequency(100.0).evaluate_against(Frequency(60.0), 50.0)
        self.assertAlmostEqual(result.ratio, 0.6)

    def test_out_of_depth(self):
        self.assertIsNone(Frequency(1000.0 * 2 ** 9).evaluate_against(Frequency(1000.0), 0.5))

    def test_important_frequency(self):
        reference = important(12.0)
        result = Frequency(24.0).evaluate_against(reference, 0.5)
        self.assertIs(result.frequency, reference)
        self.assertEqual(reference.title, "Category - Type")


class TestRanking(unittest.TestCase):
    def test_perfect_first(self):
        near = EvaluationResult(important(1.0, "near"), ratio=1.002)
        perfect = EvaluationResult(important(2.0, "perfect"), ratio=1.0, perfect=True)
        self.assertEqual(rank_results([near, perfect]), [perfect, near])
        self.assertLess(perfect.compare_to(near), 0)
        self.assertGreater(near.compare_to(perfect), 0)

    def test_by_distance(self):
        below = EvaluationResult(important(1.0, "below"), ratio=0.997)
        above = EvaluationResult(important(2.0, "above"), ratio=1.001)
        self.assertEqual(rank_results([below, above]), [above, below])

    def test_stable(self):
        first = EvaluationResult(important(1.0, "first"), ratio=1.001)
        second = EvaluationResult(important(2.0, "second"), ratio=1.001)
        self.assertEqual([r.frequency.id for r in rank_results([first, second])], ["first", "second"])


if __name__ == "__main__":
    unittest.main()
