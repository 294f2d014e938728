import json
import os
import tempfile
import unittest

from harmonicexplorer.model.exceptions import ValidationError
from harmonicexplorer.model.io import (
    ReferenceFrequencyTable, important_frequency_from_dict, load_reference_frequencies
)


def record(id="one", value=12.0, **extra):
    data = {"id": id, "source": "test", "category": "Cat", "type": "Type", "emojis": "*", "value": value}
    data.update(extra)
    return data


class TestRecords(unittest.TestCase):
    def test_from_dict(self):
        reference = important_frequency_from_dict(record(solfeggio="UT"))
        self.assertEqual(reference.hertz_value, 12.0)
        self.assertEqual(reference.solfeggio, "UT")

    def test_missing_field(self):
        data = record()
        del data["emojis"]
        with self.assertRaises(ValidationError):
            important_frequency_from_dict(data)

    def test_bad_value(self):
        with self.assertRaises(ValidationError):
            important_frequency_from_dict(record(value="loud"))
        with self.assertRaises(ValidationError):
            important_frequency_from_dict(record(value=0))

    def test_duplicate_ids(self):
        with self.assertRaises(ValidationError):
            ReferenceFrequencyTable.from_records([record("a"), record("a", 13.0)])


class TestLoad(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "references.json")

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, document):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(document, f)

    def test_bundled_table(self):
        table = load_reference_frequencies()
        self.assertGreater(len(table), 0)
        self.assertEqual(table[0].id, "hon-p-fundamental")
        self.assertIs(table.find("hon-p-fundamental"), table[0])
        self.assertTrue(all(reference.hertz_value > 0 for reference in table))

    def test_order_preserved(self):
        self._write({"frequencies": [record("b", 2.0), record("a", 1.0)]})
        table = load_reference_frequencies(self.path)
        self.assertEqual([reference.id for reference in table], ["b", "a"])
        self.assertIsNone(table.find("c"))

    def test_no_list(self):
        self._write({"other": []})
        with self.assertRaises(ValidationError):
            load_reference_frequencies(self.path)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_reference_frequencies(os.path.join(self.tmpdir.name, "missing.json"))

    def test_malformed_json(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(json.JSONDecodeError):
            load_reference_frequencies(self.path)


if __name__ == "__main__":
    unittest.main()
