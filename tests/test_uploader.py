import unittest

from core import upload_history
from core.csv_ingest import parse_results_csv, preview_frame
from core.db import get_engine, init_db
from core.errors import ApiError
from core.list_controller import ListController
from core.resources import BLOG, GAET_RESULT, RESULT, ResourceApi
from core.result_columns import RESULT_FORMAT
from core.uploader import format_for, submit_results_csv
from tests.helpers import FakeResponse, FakeResultBackend, make_client

CSV_3_GOOD_1_BLANK = (
    "COURSE,TEST DATE,RANK,ROLL NO,STUDENT NAME,Total MARKS,MARKS%\n"
    "NEET,2024-05-01,1,101,Asha,640,88.89\n"
    "NEET,2024-05-01,2,102,Ravi,610,84.72\n"
    "NEET,2024-05-01,3,103,,590,81.94\n"
    "NEET,2024-05-01,4,104,Meena,575,79.86\n"
).encode("utf-8")


class UploadEndToEndTests(unittest.TestCase):
    def setUp(self):
        self.engine = get_engine("sqlite://")
        init_db(self.engine)
        self.backend = FakeResultBackend()
        client, self.http = make_client(self.backend)
        self.api = ResourceApi(client, RESULT)
        self.ctrl = ListController(self.api)

    def test_preview_submit_refetch(self):
        report = parse_results_csv(CSV_3_GOOD_1_BLANK, RESULT_FORMAT)
        self.assertEqual(report.parsed_count, 3)
        self.assertEqual(report.dropped_rows, 1)
        self.assertEqual(len(preview_frame(report.rows, RESULT_FORMAT)), 3)

        outcome = submit_results_csv(
            self.api, "neet.csv", CSV_3_GOOD_1_BLANK,
            uploaded_by="admin@institute.test", engine=self.engine, client_rows=report,
        )
        self.assertEqual(outcome.inserted_count, 3)
        self.assertEqual(outcome.message, "Successfully uploaded 3 results!")
        self.assertEqual(self.backend.uploads[0]["data"], {"uploadedBy": "admin@institute.test"})

        self.ctrl.refresh()
        self.assertEqual([r["rollNo"] for r in self.ctrl.records], ["101", "102", "104"])

        history = upload_history.recent(self.engine)
        self.assertEqual(len(history), 1)
        row = history.iloc[0]
        self.assertEqual(row["status"], "success")
        self.assertEqual(int(row["client_rows"]), 3)
        self.assertEqual(int(row["client_dropped"]), 1)
        self.assertEqual(int(row["inserted_count"]), 3)

    def test_message_uses_backend_count(self):
        client, _ = make_client(
            lambda m, p, kw: FakeResponse(200, {"success": True, "data": {"totalRows": 7}})
        )
        outcome = submit_results_csv(ResourceApi(client, RESULT), "x.csv", b"ROLL NO\n")
        self.assertEqual(outcome.inserted_count, 7)
        self.assertIn("7", outcome.message)

    def test_missing_count_reports_zero(self):
        client, _ = make_client(lambda m, p, kw: FakeResponse(200, {"success": True, "data": {}}))
        self.assertEqual(submit_results_csv(ResourceApi(client, RESULT), "x.csv", b"").inserted_count, 0)

    def test_backend_rejection_recorded(self):
        client, _ = make_client(
            lambda m, p, kw: FakeResponse(200, {"success": False, "message": "Invalid CSV format"})
        )
        with self.assertRaises(ApiError) as ctx:
            submit_results_csv(ResourceApi(client, RESULT), "bad.csv", b"x", engine=self.engine)
        self.assertEqual(ctx.exception.message, "Invalid CSV format")
        history = upload_history.recent(self.engine, resource="result")
        self.assertEqual(history.iloc[0]["status"], "failed")
        self.assertEqual(history.iloc[0]["message"], "Invalid CSV format")

    def test_server_error_without_message(self):
        client, _ = make_client(lambda m, p, kw: FakeResponse(500, content=b"Internal Server Error"))
        with self.assertRaises(ApiError) as ctx:
            submit_results_csv(ResourceApi(client, RESULT), "bad.csv", b"x")
        self.assertEqual(ctx.exception.message, "Upload failed")

    def test_gaet_upload_has_no_uploader_field(self):
        backend = FakeResultBackend(path="/gaet-results")
        client, http = make_client(backend)
        submit_results_csv(ResourceApi(client, GAET_RESULT), "g.csv", b"ROLL NO,STUDENT NAME\nG1,A\n", uploaded_by="x")
        self.assertEqual(http.calls[0][1], "/gaet-results/upload-csv")
        self.assertEqual(backend.uploads[0]["data"], {})

    def test_only_result_resources_accept_uploads(self):
        client, _ = make_client(lambda m, p, kw: FakeResponse(200, {}))
        with self.assertRaises(ValueError):
            format_for(ResourceApi(client, BLOG))
