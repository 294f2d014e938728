import threading
import unittest

from harmonicexplorer.model.exceptions import ValidationError
from harmonicexplorer.model.frequencies import Frequency, ImportantFrequency
from harmonicexplorer.model.harmonics import Harmonic, PlayableOctave, Root, equivalent_octave_cells


class TestPlayableOctave(unittest.TestCase):
    def test_hertz_value(self):
        octave = PlayableOctave(100.0, 1, 3, additional_hertz=1.5)
        self.assertEqual(octave.octave_hertz_value, 401.5)
        octave.harmonic_hertz_value = 50.0
        self.assertEqual(octave.octave_hertz_value, 201.5)
        self.assertEqual(octave.as_frequency(), Frequency(201.5))


class TestHarmonic(unittest.TestCase):
    def test_octaves(self):
        harmonic = Harmonic(10.0, 3, octave_count=4)
        self.assertEqual(harmonic.harmonic_hertz_value, 30.0)
        self.assertEqual([o.octave_number for o in harmonic.playable_octaves], [1, 2, 3, 4])
        self.assertEqual(harmonic.find_playable_octave(4).octave_hertz_value, 240.0)

    def test_lookup_out_of_range(self):
        harmonic = Harmonic(10.0, 1, octave_count=4)
        self.assertIsNone(harmonic.find_playable_octave(0))
        self.assertIsNone(harmonic.find_playable_octave(-1))
        self.assertIsNone(harmonic.find_playable_octave(5))

    def test_matching_important_frequencies(self):
        references = [
            ImportantFrequency("far", "s", "c", "t", "*", Frequency(13.0)),
            ImportantFrequency("near", "s", "c", "t", "*", Frequency(10.01)),
            ImportantFrequency("exact", "s", "c", "t", "*", Frequency(5.0)),
        ]
        harmonic = Harmonic(10.0, 2)
        matches = harmonic.find_matching_important_frequencies(references)
        self.assertEqual([m.frequency.id for m in matches], ["exact", "near"])
        self.assertTrue(matches[0].perfect)

        harmonic.meaning_sensitivity = 0.0001
        matches = harmonic.find_matching_important_frequencies(references)
        self.assertEqual([m.frequency.id for m in matches], ["exact"])


class TestRoot(unittest.TestCase):
    def test_end_to_end(self):
        root = Root(128.0, harmonic_count=4, octave_count=2)
        self.assertEqual(root.find_harmonic(3).harmonic_hertz_value, 384.0)
        self.assertEqual(root.find_harmonic(3).find_playable_octave(2).octave_hertz_value, 768.0)
        self.assertEqual(root.find_playable_octave(3, 2).octave_hertz_value, 768.0)
        self.assertIsNone(root.find_harmonic(5))
        self.assertIsNone(root.find_harmonic(0))
        self.assertIsNone(root.find_playable_octave(3, 3))

    def test_invalid_root(self):
        with self.assertRaises(ValidationError):
            Root(0.0)
        root = Root(10.0, harmonic_count=2)
        with self.assertRaises(ValidationError):
            root.root_hertz_value = -1.0
        self.assertEqual(root.root_hertz_value, 10.0)

    def test_cascade(self):
        root = Root(10.0, harmonic_count=16, additional_hertz=1.25)
        root.root_hertz_value = 7.5
        for harmonic in root.harmonics:
            h = harmonic.harmonic_number
            self.assertAlmostEqual(harmonic.harmonic_hertz_value, h * 7.5 + 1.25)
            for octave in harmonic.playable_octaves:
                o = octave.octave_number
                self.assertAlmostEqual(octave.octave_hertz_value, h * 7.5 * 2 ** (o - 1) + 1.25)

    def test_idempotent(self):
        root = Root(10.0, harmonic_count=8)
        root.root_hertz_value = 12.0
        first = [o.octave_hertz_value for h in root.harmonics for o in h.playable_octaves]
        root.root_hertz_value = 12.0
        second = [o.octave_hertz_value for h in root.harmonics for o in h.playable_octaves]
        self.assertEqual(first, second)

    def test_identity_preserved(self):
        """ Re-tuning mutates the existing objects instead of replacing them. """
        root = Root(10.0, harmonic_count=4)
        octave = root.find_playable_octave(2, 3)
        root.update(root_hertz_value=20.0, additional_hertz=1.0)
        self.assertIs(root.find_playable_octave(2, 3), octave)
        self.assertEqual(octave.octave_hertz_value, 2 * 20.0 * 4 + 1.0)
        self.assertEqual(root.root_hertz_value, 21.0)
        self.assertEqual(root.base_hertz_value, 20.0)

    def test_sensitivity(self):
        root = Root(10.0, harmonic_count=4)
        root.meaning_sensitivity = 1.5
        self.assertTrue(all(h.meaning_sensitivity == 1.5 for h in root.harmonics))
        with self.assertRaises(ValidationError):
            root.meaning_sensitivity = -0.1

    def test_no_partial_update_observed(self):
        """ Readers holding the lock only ever see a fully propagated root. """
        root = Root(1.0, harmonic_count=64)
        errors = []

        def reader():
            for _ in range(200):
                with root.lock:
                    values = {h.harmonic_hertz_value / h.harmonic_number for h in root.harmonics}
                if len(values) != 1:
                    errors.append(values)

        thread = threading.Thread(target=reader)
        thread.start()
        for value in range(2, 200):
            root.root_hertz_value = float(value)
        thread.join()
        self.assertEqual(errors, [])


class TestEquivalentCells(unittest.TestCase):
    def test_fundamental(self):
        cells = equivalent_octave_cells(1, 3)
        self.assertIn((1, 3), cells)
        self.assertIn((2, 2), cells)
        self.assertIn((4, 1), cells)
        self.assertEqual(len(cells), 3)

    def test_higher_octaves(self):
        cells = equivalent_octave_cells(4, 1, octave_count=4)
        self.assertEqual(sorted(cells), [(1, 3), (2, 2), (4, 1)])

    def test_bounded_by_harmonic_count(self):
        cells = equivalent_octave_cells(100, 2, harmonic_count=128)
        self.assertNotIn((200, 1), cells)
        self.assertIn((50, 3), cells)


if __name__ == "__main__":
    unittest.main()
