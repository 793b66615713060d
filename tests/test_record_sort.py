import unittest
from datetime import date, datetime, timezone

from app.schemas.collection import SortSpec
from app.services.record_sort import compare_values, parse_iso_datetime, parse_number, sort_records


def _ids(records):
    return [record["id"] for record in records]


class CompareValuesTests(unittest.TestCase):
    def test_iso_dates_compare_chronologically(self):
        self.assertLess(compare_values("2023-12-31", "2024-01-01T00:00:00Z"), 0)
        # 09:00 at +02:00 is 07:00 UTC
        self.assertLess(compare_values("2024-01-01T09:00:00+02:00", "2024-01-01T08:00:00Z"), 0)

    def test_numbers_and_numeric_strings_compare_numerically(self):
        self.assertLess(compare_values("9", "10"), 0)
        self.assertEqual(compare_values(2, "2.0"), 0)

    def test_text_compares_case_insensitively(self):
        self.assertLess(compare_values("apple", "Banana"), 0)
        self.assertEqual(compare_values("ABC", "abc"), 0)

    def test_large_integers_compare_exactly(self):
        self.assertGreater(compare_values(9007199254740993, 9007199254740992), 0)
        self.assertLess(compare_values("9007199254740992", 9007199254740993), 0)
        self.assertLess(compare_values("0.1", 0.2), 0)

    def test_helpers(self):
        self.assertIsNone(parse_number(True))
        self.assertIsNone(parse_number("12abc"))
        self.assertEqual(parse_number("-1.5"), -1.5)
        self.assertIsNone(parse_iso_datetime("2024-13-45"))
        self.assertEqual(parse_iso_datetime(date(2024, 5, 1)), datetime(2024, 5, 1, tzinfo=timezone.utc))


class SortRecordsTests(unittest.TestCase):
    def test_sort_is_stable_in_both_directions(self):
        records = [
            {"id": 1, "priority": "b"},
            {"id": 2, "priority": "a"},
            {"id": 3, "priority": "b"},
            {"id": 4, "priority": "a"},
        ]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="priority"))), [2, 4, 1, 3])
        self.assertEqual(_ids(sort_records(records, SortSpec(field="priority", direction="desc"))), [1, 3, 2, 4])

    def test_missing_values_sort_last_ascending_and_first_descending(self):
        records = [{"id": 1, "v": 2}, {"id": 2}, {"id": 3, "v": None}, {"id": 4, "v": 1}]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="v"))), [4, 1, 2, 3])
        self.assertEqual(_ids(sort_records(records, SortSpec(field="v", direction="desc"))), [2, 3, 1, 4])

    def test_numeric_strings_sort_numerically(self):
        records = [{"id": "a", "n": "10"}, {"id": "b", "n": "9"}, {"id": "c", "n": "100"}]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="n"))), ["b", "a", "c"])

    def test_large_integers_keep_exact_order(self):
        records = [{"id": 1, "n": 9007199254740993}, {"id": 2, "n": 9007199254740992}, {"id": 3, "n": "9007199254740994"}]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="n"))), [2, 1, 3])
        self.assertEqual(_ids(sort_records(records, SortSpec(field="n", direction="desc"))), [3, 1, 2])

    def test_dates_sort_chronologically(self):
        records = [
            {"id": "a", "createdAt": "2024-03-01T00:00:00Z"},
            {"id": "b", "createdAt": "2023-12-31"},
            {"id": "c", "createdAt": "2024-01-15T10:00:00+02:00"},
        ]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="createdAt"))), ["b", "c", "a"])

    def test_text_sorts_case_insensitively(self):
        records = [{"id": 1, "name": "banana"}, {"id": 2, "name": "Apple"}, {"id": 3, "name": "cherry"}]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="name"))), [2, 1, 3])

    def test_nested_path(self):
        records = [{"id": 1, "owner": {"name": "Zed"}}, {"id": 2, "owner": {"name": "amy"}}]
        self.assertEqual(_ids(sort_records(records, SortSpec(field="owner.name"))), [2, 1])

    def test_input_is_not_reordered(self):
        records = [{"id": 2}, {"id": 1}]
        result = sort_records(records, SortSpec(field="id"))
        self.assertEqual(_ids(result), [1, 2])
        self.assertEqual(_ids(records), [2, 1])

    def test_no_spec_keeps_order(self):
        records = [{"id": 2}, {"id": 1}]
        self.assertEqual(_ids(sort_records(records, None)), [2, 1])


if __name__ == "__main__":
    unittest.main()
