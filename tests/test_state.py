import unittest

from harmonicexplorer.model.exceptions import InvalidKeyError, PlayerBusyError, ValidationError
from harmonicexplorer.model.state import (
    BASE_ROOT_OPTIONS, CUSTOM_ROOT_KEY, SCHUMANN_ROOT_KEY, SessionState, build_root_options
)


class TestRootOptions(unittest.TestCase):
    def test_references_first(self):
        session = SessionState(harmonic_count=16)
        options = build_root_options(session.references)
        self.assertEqual(len(options), len(session.references) + len(BASE_ROOT_OPTIONS))
        self.assertEqual(options[0].key, session.references[0].id)
        self.assertEqual(options[-1].key, BASE_ROOT_OPTIONS[-1].key)


class TestSessionState(unittest.TestCase):
    def setUp(self):
        self.session = SessionState(harmonic_count=16)

    def test_initial_root(self):
        first = self.session.references[0]
        self.assertEqual(self.session.selected_root_key, first.id)
        self.assertEqual(self.session.root.root_hertz_value, first.hertz_value)
        self.assertEqual(self.session.root.harmonic_count, 16)

    def test_new_root_clears_tones(self):
        self.session.player.add_harmonic_octave(1, 1)
        self.assertTrue(self.session.select_root("a0"))
        self.assertEqual(self.session.root.root_hertz_value, 27.0)
        self.assertEqual(self.session.player.tones, [])

    def test_root_kept_while_exporting(self):
        player = self.session.player
        player.add_harmonic_octave(1, 1)
        key, root = self.session.selected_root_key, self.session.root
        player._exporting = True
        try:
            with self.assertRaises(PlayerBusyError):
                self.session.select_root("a0")
        finally:
            player._exporting = False
        self.assertEqual(self.session.selected_root_key, key)
        self.assertIs(self.session.root, root)
        self.assertEqual(len(player.tones), 1)

    def test_same_root_keeps_tones(self):
        self.session.select_root("a0")
        self.session.player.add_harmonic_octave(1, 1)
        self.assertFalse(self.session.select_root(CUSTOM_ROOT_KEY, 27.0))
        self.assertEqual(len(self.session.player.tones), 1)
        self.assertEqual(self.session.selected_root_key, CUSTOM_ROOT_KEY)

    def test_schumann_offset(self):
        self.session.select_root(SCHUMANN_ROOT_KEY)
        root = self.session.root
        self.assertEqual(root.base_hertz_value, 6.5)
        self.assertAlmostEqual(root.root_hertz_value, 7.833333333)
        self.assertAlmostEqual(root.find_harmonic(2).harmonic_hertz_value, 2 * 6.5 + 1.333333333)

    def test_invalid_selection(self):
        with self.assertRaises(InvalidKeyError):
            self.session.select_root("nope")
        with self.assertRaises(ValidationError):
            self.session.select_root(CUSTOM_ROOT_KEY, 0.0)
        with self.assertRaises(ValidationError):
            self.session.select_root(CUSTOM_ROOT_KEY)

    def test_sensitivity_carried_to_new_root(self):
        self.session.set_meaning_sensitivity(2.0)
        self.session.select_root("c0")
        self.assertEqual(self.session.root.meaning_sensitivity, 2.0)
        self.assertEqual(self.session.root.find_harmonic(3).meaning_sensitivity, 2.0)

    def test_tuning(self):
        self.session.change_basis("a440e")
        self.assertEqual(self.session.tuner.tuning_key, "equal")
        self.session.change_tuning("just5-sym1")
        self.assertEqual(self.session.tuner.tuning_key, "just5-sym1")


if __name__ == "__main__":
    unittest.main()
