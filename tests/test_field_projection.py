import copy
import unittest

from app.services.field_projection import project_record, project_records

RECORD = {
    "id": "r1",
    "title": "Quarterly audit",
    "owner": {"name": "Ada", "email": "ada@example.com"},
    "tags": ["finance"],
}


class FieldProjectionTests(unittest.TestCase):
    def test_include_keeps_only_requested_paths(self):
        projected = project_record(RECORD, ["title", "owner.name"])
        self.assertEqual(projected, {"title": "Quarterly audit", "owner": {"name": "Ada"}})

    def test_unknown_paths_are_omitted(self):
        projected = project_record(RECORD, ["title", "owner.phone", "missing"])
        self.assertEqual(projected, {"title": "Quarterly audit"})

    def test_always_include_adds_id(self):
        projected = project_record(RECORD, ["title"], always_include=("id",))
        self.assertEqual(projected, {"id": "r1", "title": "Quarterly audit"})

    def test_no_fields_returns_record_unchanged(self):
        self.assertEqual(project_record(RECORD, None), RECORD)
        self.assertEqual(project_records([RECORD], None), [RECORD])

    def test_exclude_removes_nested_path_without_touching_source(self):
        original = copy.deepcopy(RECORD)
        projected = project_record(RECORD, None, exclude=["owner.email", "tags"])
        self.assertEqual(projected, {"id": "r1", "title": "Quarterly audit", "owner": {"name": "Ada"}})
        self.assertEqual(RECORD, original)

    def test_exclude_never_drops_always_included_fields(self):
        projected = project_record(RECORD, ["id", "title"], exclude=["id"], always_include=("id",))
        self.assertIn("id", projected)

    def test_projection_copies_nested_values(self):
        projected = project_record(RECORD, ["owner"])
        projected["owner"]["name"] = "Changed"
        self.assertEqual(RECORD["owner"]["name"], "Ada")

    def test_projects_every_record(self):
        records = [{"id": 1, "a": 1, "b": 2}, {"id": 2, "a": 3}]
        self.assertEqual(project_records(records, ["b"]), [{"b": 2}, {}])


if __name__ == "__main__":
    unittest.main()
