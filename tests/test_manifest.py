import unittest

from seat_manifest.errors import ConfigurationError
from seat_manifest.manifest import (
    compare_manifests,
    create_manifest_from_scratch,
    generate_manifest,
    generate_update_hash,
    normalize_manifest_data,
    validate_manifest_structure,
)
from seat_manifest.models import Manifest, PlaceGeneration


class TestUpdateHash(unittest.TestCase):
    def test_known_digest(self):
        self.assertEqual(generate_update_hash(["C", "A", "B"]), "b88b1657825d7e07fe82346588e16679")

    def test_order_independent(self):
        self.assertEqual(generate_update_hash(["x1", "x2", "x3"]), generate_update_hash(["x3", "x1", "x2"]))

    def test_empty(self):
        self.assertIsNone(generate_update_hash([]))


class TestGenerateManifest(unittest.TestCase):
    def test_fields(self):
        m = generate_manifest(["B", "A"], event_id="EV1", update_time=1700000000000)
        self.assertEqual(m.event_id, "EV1")
        self.assertEqual(m.update_time, 1700000000000)
        self.assertEqual(m.place_ids, ["B", "A"])
        self.assertEqual(m.update_hash, generate_update_hash(["A", "B"]))

    def test_default_event_id(self):
        m = generate_manifest(["A"], update_time=42)
        self.assertEqual(m.event_id, "MANIFEST-42")

    def test_empty_rejected(self):
        with self.assertRaises(ConfigurationError):
            generate_manifest([])


class TestCompareManifests(unittest.TestCase):
    def setUp(self):
        self.a = generate_manifest(["A", "B", "C"], update_time=1)
        self.b = generate_manifest(["B", "C", "D", "E"], update_time=2)

    def test_same_manifest_unchanged(self):
        self.assertFalse(compare_manifests(self.a, self.a).changed)

    def test_added_and_removed(self):
        diff = compare_manifests(self.a, self.b)
        self.assertTrue(diff.changed)
        self.assertEqual(diff.added, ["D", "E"])
        self.assertEqual(diff.removed, ["A"])
        self.assertEqual(diff.modified, [])

    def test_symmetric(self):
        ab = compare_manifests(self.a, self.b)
        ba = compare_manifests(self.b, self.a)
        self.assertEqual(ab.added, ba.removed)
        self.assertEqual(ab.removed, ba.added)

    def test_missing_side(self):
        diff = compare_manifests(None, self.a)
        self.assertTrue(diff.changed)
        self.assertEqual(diff.reason, "missing manifest data")
        self.assertEqual(diff.to_dict()["reason"], "missing manifest data")

    def test_same_ids_without_hash(self):
        old = Manifest(event_id="e", update_time=1, place_ids=["A", "B"])
        new = Manifest(event_id="e", update_time=2, place_ids=["B", "A"])
        self.assertFalse(compare_manifests(old, new).changed)

    def test_unchanged_dict_is_minimal(self):
        self.assertEqual(compare_manifests(self.a, self.a).to_dict(), {"changed": False})


class TestNormalizeManifest(unittest.TestCase):
    def test_places_stubbed(self):
        m = generate_manifest(["ABCDEFGHIJKL", "X1"], event_id="EV", update_time=5)
        n = normalize_manifest_data(m, venue_id="V1")
        self.assertEqual(n.venue, "V1")
        self.assertEqual(n.name, "Manifest for EV")
        self.assertEqual(n.external_event_id, "EV")
        self.assertEqual(n.update_hash, m.update_hash)
        self.assertEqual([p.place_id for p in n.places], ["ABCDEFGHIJKL", "X1"])
        self.assertEqual(n.places[0].section, "ABCDEFG")
        self.assertEqual(n.places[1].metadata, {"source": "generated", "original_index": 1})
        self.assertEqual(n.places[0].pricing.currency, "EUR")
        self.assertTrue(n.places[0].available)

    def test_empty_rejected(self):
        with self.assertRaises(ConfigurationError):
            normalize_manifest_data(Manifest(event_id="e", update_time=1))


class TestValidateManifestStructure(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(validate_manifest_structure({"place_ids": ["A"], "update_hash": "x", "update_time": 1}), (True, []))

    def test_missing_ids(self):
        ok, errors = validate_manifest_structure({"update_hash": "x"})
        self.assertFalse(ok)
        self.assertEqual(len(errors), 1)

    def test_duplicates_and_types(self):
        ok, errors = validate_manifest_structure({"place_ids": ["A", "A"], "update_hash": 5, "update_time": "now"})
        self.assertFalse(ok)
        self.assertEqual(len(errors), 3)

    def test_not_an_object(self):
        self.assertFalse(validate_manifest_structure(["A"])[0])


class TestCreateFromScratch(unittest.TestCase):
    def test_grid_manifest(self):
        gen = PlaceGeneration(prefix="V", pattern="grid", pattern_config={"seats_per_row": 5})
        n = create_manifest_from_scratch(venue_id="V1", event_id="E1", place_generation=gen, total_places=12)
        self.assertEqual(len(n.places), 12)
        self.assertEqual(n.places[0].place_id, "V000000")
        self.assertEqual(len({p.place_id for p in n.places}), 12)


if __name__ == "__main__":
    unittest.main()
