import unittest

from seat_manifest.errors import InputError
from seat_manifest.identifiers import generate_place_ids, to_base36


class TestBase36(unittest.TestCase):
    def test_padding(self):
        self.assertEqual(to_base36(0), "00")
        self.assertEqual(to_base36(35), "0Z")
        self.assertEqual(to_base36(36), "10")
        self.assertEqual(to_base36(1296), "100")
        self.assertEqual(to_base36(5, width=3), "005")

    def test_negative_raises(self):
        with self.assertRaises(InputError):
            to_base36(-1)


class TestGeneratePlaceIds(unittest.TestCase):
    def test_sequential(self):
        ids = generate_place_ids(prefix="S", count=3)
        self.assertEqual(ids, ["S00", "S01", "S02"])

    def test_sequential_unique_across_counts(self):
        for count in (0, 1, 35, 36, 1295, 1296, 1297, 10000):
            ids = generate_place_ids(count=count)
            self.assertEqual(len(ids), count)
            self.assertEqual(len(set(ids)), count)

    def test_grid_walks_seats_then_rows_then_sections(self):
        ids = generate_place_ids(
            prefix="G", count=5, pattern="grid", pattern_config={"sections": 2, "rows_per_section": 2, "seats_per_row": 2}
        )
        self.assertEqual(ids, ["G000000", "G000001", "G000100", "G000101", "G010000"])

    def test_grid_unique_past_configured_grid(self):
        cfg = {"sections": 1, "rows_per_section": 3, "seats_per_row": 4}
        for count in (1, 12, 13, 1296, 10000):
            ids = generate_place_ids(count=count, pattern="grid", pattern_config=cfg)
            self.assertEqual(len(ids), count)
            self.assertEqual(len(set(ids)), count)

    def test_grid_unique_with_defaults(self):
        ids = generate_place_ids(count=10000, pattern="grid")
        self.assertEqual(len(set(ids)), 10000)

    def test_grid_expands_past_configured_sections(self):
        cfg = {"sections": 1, "rows_per_section": 1, "seats_per_row": 2}
        ids = generate_place_ids(count=3, pattern="grid", pattern_config=cfg)
        self.assertEqual(ids, ["000000", "000001", "010000"])

    def test_bad_grid_sections_raises(self):
        with self.assertRaises(InputError):
            generate_place_ids(count=1, pattern="grid", pattern_config={"sections": 0})

    def test_custom_generator(self):
        ids = generate_place_ids(count=3, pattern="custom", pattern_config={"generator": lambda i, cfg: f"X-{i}"})
        self.assertEqual(ids, ["X-0", "X-1", "X-2"])

    def test_custom_without_generator_raises(self):
        with self.assertRaises(InputError):
            generate_place_ids(count=3, pattern="custom")

    def test_zero_count(self):
        self.assertEqual(generate_place_ids(count=0), [])

    def test_negative_count_raises(self):
        with self.assertRaises(InputError):
            generate_place_ids(count=-1)

    def test_unknown_pattern_raises(self):
        with self.assertRaises(InputError):
            generate_place_ids(count=1, pattern="zigzag")

    def test_bad_grid_config_raises(self):
        with self.assertRaises(InputError):
            generate_place_ids(count=1, pattern="grid", pattern_config={"seats_per_row": 0})


if __name__ == "__main__":
    unittest.main()
