from tests.admin.base import *  # noqa: F401,F403


class AdminCollectionsQueryTests(AdminCollectionsBase):
    def test_list_returns_camel_case_pagination(self):
        response = self.client.get("/api/admin/collections/todos")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(self._ids(body), ["TODO3", "TODO2", "TODO1"])
        self.assertEqual(body["pagination"]["total"], 3)
        self.assertEqual(body["pagination"]["totalPages"], 1)
        self.assertFalse(body["pagination"]["hasNext"])
        self.assertIsNone(body["pagination"]["nextPage"])

    def test_search_shrinks_total(self):
        response = self.client.get("/api/admin/collections/todos/search", params={"q": "fix", "limit": 1, "page": 2})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["pagination"]["total"], 2)
        self.assertEqual(self._ids(body), ["TODO1"])
        self.assertEqual(body["pagination"]["prevPage"], 1)

    def test_repeated_fields_params(self):
        response = self.client.get("/api/admin/collections/todos?fields=title&fields=priority&sort=title")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"][0], {"id": "TODO1", "title": "Fix bug", "priority": "high"})

    def test_filter_params(self):
        response = self.client.get("/api/admin/collections/todos", params={"priority": "high,low", "sort": "title"})
        self.assertEqual(self._ids(response.json()), ["TODO1", "TODO3"])

    def test_unknown_resource_is_404(self):
        response = self.client.get("/api/admin/collections/invoices")
        self.assertEqual(response.status_code, 404)

    def test_invalid_date_is_400(self):
        response = self.client.get("/api/admin/collections/todos", params={"startDate": "yesterday"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("startDate", response.json()["detail"])

    def test_stats(self):
        response = self.client.get("/api/admin/collections/todos/stats")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["summary"], {"total": 3, "completed": 1, "pending": 2})
        self.assertEqual(sum(body["byGroup"].values()), 3)
        self.assertIn("priority", body["byField"])


class AdminCollectionsExportTests(AdminCollectionsBase):
    def test_csv_download(self):
        response = self.client.get(
            "/api/admin/collections/todos/export", params={"format": "csv", "fields": "title", "sort": "title"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/csv"))
        self.assertRegex(response.headers["content-disposition"], r'^attachment; filename="todos-\d{4}-\d{2}-\d{2}\.csv"$')
        self.assertEqual(response.headers["x-total-records"], "3")
        self.assertEqual(
            response.text,
            'id,title\r\nTODO1,Fix bug\r\nTODO3,"Fix typo, again"\r\nTODO2,Write docs\r\n',
        )

    def test_json_download_is_default(self):
        response = self.client.get("/api/admin/collections/todos/export")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("application/json"))
        self.assertEqual(len(response.json()), 3)

    def test_unknown_format_is_400(self):
        response = self.client.get("/api/admin/collections/todos/export", params={"format": "xml"})
        self.assertEqual(response.status_code, 400)


class AdminCollectionsBulkTests(AdminCollectionsBase):
    def test_partial_delete_is_207(self):
        response = self._bulk("todos", "delete", ["TODO1", "TODO404"])
        self.assertEqual(response.status_code, 207)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["summary"], {"total": 2, "successful": 1, "failed": 1})
        self.assertEqual(body["results"][1]["status"], "failure")
        self.assertEqual(body["results"][1]["error"], "NotFound")
        self.assertEqual(len(self.store.fetch_all("todos")), 2)

    def test_create_all_valid_is_200(self):
        response = self._bulk(
            "todos",
            "create",
            [{"title": "Ship release", "priority": "high"}, {"title": "Plan sprint", "priority": "low"}],
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertTrue(all(item["data"]["id"].startswith("TODO") for item in body["results"]))
        self.assertEqual(len(self.store.fetch_all("todos")), 5)

    def test_update_reports_validation_failures(self):
        response = self._bulk(
            "todos",
            "update",
            [{"id": "TODO1", "data": {"completed": True}}, {"id": "TODO2", "data": {"priority": "urgent"}}],
        )
        self.assertEqual(response.status_code, 207)
        body = response.json()
        self.assertEqual(body["results"][0]["data"]["completed"], True)
        self.assertEqual(body["results"][1]["error"], "ValidationFailed")

    def test_unsupported_operation_is_400(self):
        response = self._bulk("todos", "archive", ["TODO1"])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.store.fetch_all("todos")), 3)

    def test_bulk_on_unknown_resource_is_404(self):
        response = self._bulk("invoices", "delete", ["X"])
        self.assertEqual(response.status_code, 404)
