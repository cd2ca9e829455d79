import unittest

from core.resources import (
    ADMISSION_FORM,
    ALL,
    BLOG,
    ENQUIRY,
    RESOURCES,
    RESULT,
    ResourceApi,
    parse_page,
    record_id,
)
from tests.helpers import FakeResponse, make_client


class ParsePageTests(unittest.TestCase):
    def test_list_key_with_pagination_pages(self):
        body = {"success": True, "data": {"results": [{"_id": "1"}], "pagination": {"page": 2, "pages": 5, "total": 41}}}
        page = parse_page(body, ("results",))
        self.assertEqual((page.page, page.total_pages, page.total), (2, 5, 41))
        self.assertEqual(page.records, [{"_id": "1"}])

    def test_total_pages_and_nested_data(self):
        body = {"success": True, "data": {"data": {"blogs": [{"_id": "a"}, {"_id": "b"}],
                                                   "pagination": {"totalPages": 3, "total": 25}}}}
        page = parse_page(body, ("blogs",), fallback_page=3)
        self.assertEqual(len(page.records), 2)
        self.assertEqual((page.page, page.total_pages, page.total), (3, 3, 25))

    def test_data_data_list(self):
        body = {"success": True, "data": {"data": [{"_id": "x"}]}}
        self.assertEqual(parse_page(body, ("enquiries",)).records, [{"_id": "x"}])

    def test_bare_list_in_data(self):
        page = parse_page({"success": True, "data": [{"_id": "1"}, {"_id": "2"}]}, ("courses",))
        self.assertEqual(page.total, 2)
        self.assertEqual(page.total_pages, 1)

    def test_missing_everything(self):
        page = parse_page(None, ("x",))
        self.assertEqual((page.records, page.page, page.total_pages, page.total), ([], 1, 1, 0))

    def test_record_id(self):
        self.assertEqual(record_id({"_id": 5}), "5")
        self.assertEqual(record_id({"id": "abc"}), "abc")
        self.assertIsNone(record_id({}))


class FilterDefTests(unittest.TestCase):
    def test_all_sentinel_omitted(self):
        f = ENQUIRY.filters[0]
        self.assertEqual(f.to_params(ALL), {})
        self.assertEqual(f.to_params(""), {})
        self.assertEqual(f.to_params("pending"), {"status": "pending"})

    def test_value_map(self):
        f = BLOG.filters[1]
        self.assertEqual(f.to_params("draft"), {"isPublished": False})
        self.assertEqual(f.to_params("featured"), {"isFeatured": True})

    def test_stats_driven_options(self):
        course = next(f for f in RESULT.filters if f.param == "course")
        stats = {"courses": ["NEET", "JEE", ""], "batches": ["B1"]}
        self.assertEqual(course.options_for(stats), (ALL, "NEET", "JEE"))
        self.assertEqual(course.options_for(None), (ALL,))
        self.assertEqual(course.options_for({"courses": "NEET"}), (ALL,))
        self.assertEqual(ENQUIRY.filters[0].options_for(stats), ENQUIRY.filters[0].options)

    def test_text_and_year_filters(self):
        by_param = {f.param: f for f in RESULT.filters}
        self.assertEqual(by_param["branch"].to_params("  North "), {"branch": "North"})
        self.assertEqual(by_param["branch"].to_params("   "), {})
        self.assertEqual(by_param["batchYear"].to_params("2024"), {"batchYear": 2024})
        self.assertEqual(by_param["batchYear"].to_params("20x4"), {})


class ResourceApiTests(unittest.TestCase):
    def _api(self, spec, body=None):
        client, http = make_client(lambda m, p, kw: FakeResponse(200, body or {"success": True, "data": {}}))
        return ResourceApi(client, spec), http

    def test_catalogue_paths(self):
        self.assertEqual(len(RESOURCES), 14)
        self.assertEqual(RESOURCES["gvet_answer_keys"].path, "/gvet/answer-key")
        self.assertEqual(RESOURCES["gaet_results"].fetch_limit, 1000)

    def test_status_patch_vs_put(self):
        api, http = self._api(ADMISSION_FORM)
        api.update_status("7", "approved")
        self.assertEqual(http.calls[-1][:2], ("PATCH", "/admission-form/7/status"))
        self.assertEqual(http.calls[-1][2]["json"], {"status": "approved"})

        api, http = self._api(ENQUIRY)
        api.update_status("9", "contacted")
        self.assertEqual(http.calls[-1][:2], ("PUT", "/enquiry/9"))

    def test_toggle(self):
        api, http = self._api(BLOG)
        api.toggle("3", "toggle-publish")
        self.assertEqual(http.calls[-1][:2], ("PATCH", "/blog/3/toggle-publish"))

    def test_delete_many(self):
        api, http = self._api(RESULT, {"success": True, "data": {"deletedCount": 2}})
        self.assertEqual(api.delete_many(["a", "b"]), 2)
        self.assertEqual(http.calls[-1][:2], ("DELETE", "/result/multiple"))
        self.assertEqual(http.calls[-1][2]["json"], {"ids": ["a", "b"]})

    def test_delete_many_trusts_zero_count(self):
        api, _ = self._api(RESULT, {"success": True, "data": {"deletedCount": 0}})
        self.assertEqual(api.delete_many(["a", "b"]), 0)

    def test_delete_many_without_count_assumes_all(self):
        api, _ = self._api(RESULT, {"success": True, "message": "deleted"})
        self.assertEqual(api.delete_many(["a", "b", "c"]), 3)

    def test_stats_unwrapped(self):
        api, _ = self._api(RESULT, {"success": True, "data": {"total": 12, "averageMarks": 71.5}})
        self.assertEqual(api.stats(), {"total": 12, "averageMarks": 71.5})

    def test_get_unwraps_record(self):
        api, http = self._api(BLOG, {"success": True, "data": {"_id": "3", "title": "Hi"}})
        self.assertEqual(api.get("3")["title"], "Hi")
        self.assertEqual(http.calls[-1][:2], ("GET", "/blog/3"))

    def test_upload_csv_field_name(self):
        api, http = self._api(RESULT, {"success": True, "data": {"insertedCount": 3}})
        self.assertEqual(api.upload_csv("r.csv", b"data", {"uploadedBy": "x"}), {"insertedCount": 3})
        method, path, kwargs = http.calls[-1]
        self.assertEqual((method, path), ("POST", "/result/upload-csv"))
        self.assertEqual(kwargs["files"]["csvFile"][0], "r.csv")

    def test_result_form_fields_follow_columns(self):
        names = [f.name for f in RESULT.form_fields]
        self.assertEqual(names[:3], ["course", "testDate", "rank"])
        self.assertEqual([f.name for f in RESULT.form_fields if f.required], ["rollNo", "studentName"])
