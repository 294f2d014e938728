import unittest

from harmonicexplorer.model.display import AUTO, FAIR, GOOD, LOOSE, NEAR, POOR, describe_match, describe_note
from harmonicexplorer.model.frequencies import EvaluationResult, Frequency, ImportantFrequency
from harmonicexplorer.model.tuning import NoteMatch

REFERENCE = ImportantFrequency("id", "source", "Sleep", "Delta", "😴", Frequency(2.0))


class TestDescribeMatch(unittest.TestCase):
    def test_perfect(self):
        label = describe_match(EvaluationResult(REFERENCE, ratio=1.0, perfect=True))
        self.assertEqual((label.text, label.color, label.bold), ("perfect", GOOD, True))
        self.assertEqual(label.emojis, "😴")
        self.assertEqual(label.tooltip, "Sleep - Delta")

    def test_nearly_perfect(self):
        label = describe_match(EvaluationResult(REFERENCE, ratio=1.0000001))
        self.assertEqual(label.text, "~perfect")
        self.assertTrue(label.bold)

    def test_graded(self):
        above = describe_match(EvaluationResult(REFERENCE, ratio=1.003))
        self.assertEqual(above.text, "+0.300%")
        self.assertEqual(above.color, FAIR)
        below = describe_match(EvaluationResult(REFERENCE, ratio=0.997))
        self.assertEqual(below.text, "-0.300%")
        self.assertEqual(below.color, FAIR)
        self.assertEqual(describe_match(EvaluationResult(REFERENCE, ratio=1.02)).color, POOR)

    def test_graded_by_magnitude(self):
        """Deviations below the reference grade by magnitude, like those above."""
        for ratio, color in ((1.0015, NEAR), (1.007, LOOSE), (1.02, POOR)):
            mirrored = 2.0 - ratio
            with self.subTest(ratio=ratio):
                self.assertEqual(describe_match(EvaluationResult(REFERENCE, ratio=ratio)).color, color)
                self.assertEqual(describe_match(EvaluationResult(REFERENCE, ratio=mirrored)).color, color)
        self.assertEqual(describe_match(EvaluationResult(REFERENCE, ratio=0.98)).text, "-2.000%")


class TestDescribeNote(unittest.TestCase):
    def test_unknown(self):
        label = describe_note(NoteMatch.unknown())
        self.assertEqual(label.text, "(out of range)")
        self.assertFalse(label.in_range)
        self.assertEqual(label.color, AUTO)

    def test_perfect(self):
        label = describe_note(NoteMatch("C", 4, 256.0, 0.0, "octave of C"))
        self.assertEqual(label.text, "C 4")
        self.assertEqual(label.cents_text, "(perfect)")
        self.assertTrue(label.bold)

    def test_deviation(self):
        label = describe_note(NoteMatch("F♯", 3, 181.0, -12.5, "tritone of C"))
        self.assertEqual(label.text, "F♯3")
        self.assertEqual(label.cents_text, "(-12.5¢)")
        self.assertEqual(label.interval, "tritone of C")
        self.assertFalse(label.bold)


if __name__ == "__main__":
    unittest.main()
