import math
import unittest

from seat_manifest.errors import WarningKind
from seat_manifest.identifiers import generate_place_ids
from seat_manifest.models import (
    Bounds,
    GeneralAdmissionConfig,
    GridLayoutConfig,
    RadialLayoutConfig,
    SectionNaming,
    ZoneConfig,
)
from seat_manifest.seatmap import (
    generate_general_admission_layout,
    generate_grid_layout,
    generate_radial_layout,
    section_name,
)


class TestSectionName(unittest.TestCase):
    def test_numeric(self):
        self.assertEqual(section_name(0), "Section 1")
        self.assertEqual(section_name(9), "Section 10")

    def test_alphabetic(self):
        naming = SectionNaming(pattern="alphabetic")
        self.assertEqual(section_name(0, naming), "A")
        self.assertEqual(section_name(25, naming), "Z")
        self.assertEqual(section_name(26, naming), "AA")
        self.assertEqual(section_name(27, naming), "AB")

    def test_alphanumeric(self):
        naming = SectionNaming(pattern="alphanumeric")
        self.assertEqual(section_name(0, naming), "A1")
        self.assertEqual(section_name(10, naming), "B1")

    def test_custom_cycles(self):
        naming = SectionNaming(pattern="custom", custom_names=["North", "South"])
        self.assertEqual([section_name(i, naming) for i in range(3)], ["North", "South", "North"])


class TestGridLayout(unittest.TestCase):
    def test_two_sections_of_two_rows(self):
        ids = generate_place_ids(count=40)
        result = generate_grid_layout(GridLayoutConfig(total_seats=40, sections=2, seats_per_row=10), ids)
        places = result.places
        self.assertEqual(len(places), 40)
        self.assertEqual({p.section for p in places}, {"Section 1", "Section 2"})
        for name in ("Section 1", "Section 2"):
            in_section = [p for p in places if p.section == name]
            self.assertEqual(len(in_section), 20)
            self.assertEqual({p.row for p in in_section}, {"R1", "R2"})
            self.assertEqual({p.seat for p in in_section}, {str(i) for i in range(1, 11)})

    def test_coordinates(self):
        ids = generate_place_ids(count=40)
        places = generate_grid_layout(GridLayoutConfig(total_seats=40, sections=2, seats_per_row=10), ids).places
        self.assertEqual((places[0].x, places[0].y), (0, 0))
        self.assertEqual((places[11].x, places[11].y), (2, 3))
        self.assertEqual((places[20].x, places[20].y), (100, 0))

    def test_empty(self):
        self.assertEqual(generate_grid_layout(GridLayoutConfig(), []).places, [])

    def test_zero_sections_rejected(self):
        with self.assertRaises(ValueError):
            GridLayoutConfig(sections=0)


class TestRadialLayout(unittest.TestCase):
    def test_positions_on_rings(self):
        cfg = RadialLayoutConfig(seats_per_row=4, total_rows=2)
        places = generate_radial_layout(cfg, generate_place_ids(count=8)).places
        self.assertEqual(len(places), 8)
        self.assertAlmostEqual(places[0].x, 400.0)
        self.assertAlmostEqual(places[0].y, 500.0)
        for p in places[4:]:
            self.assertAlmostEqual(math.hypot(p.x - 500, p.y - 500), 120.0)
            self.assertEqual(p.row, "R2")

    def test_overflow_dropped_with_warning(self):
        cfg = RadialLayoutConfig(seats_per_row=4, total_rows=2)
        result = generate_radial_layout(cfg, generate_place_ids(count=10))
        self.assertEqual(len(result.places), 8)
        self.assertEqual(len(result.warnings), 1)
        self.assertEqual(result.warnings[0].kind, WarningKind.radial_overflow)
        self.assertEqual(result.warnings[0].placed, 8)


class TestGeneralAdmission(unittest.TestCase):
    def test_capacity_shared_between_zones(self):
        cfg = GeneralAdmissionConfig(capacity=1000, zones=[ZoneConfig(), ZoneConfig(name="Pit", capacity=150)])
        zones = generate_general_admission_layout(cfg).zones
        self.assertEqual([z.capacity for z in zones], [500, 150])
        self.assertEqual(zones[0].zone_id, "Zone1")
        self.assertEqual(zones[1].name, "Pit")
        self.assertTrue(all(z.places == [] for z in zones))

    def test_auto_capacity_from_area(self):
        zone = ZoneConfig(bounds=Bounds(x1=0, y1=0, x2=10, y2=20), capacity_mode="auto", density_per_unit=2)
        zones = generate_general_admission_layout(GeneralAdmissionConfig(zones=[zone])).zones
        self.assertEqual(zones[0].capacity, 400)

    def test_no_zones(self):
        result = generate_general_admission_layout(GeneralAdmissionConfig(), ["A", "B"])
        self.assertEqual(result.zones, [])
        self.assertEqual(result.places, [])


if __name__ == "__main__":
    unittest.main()
