import unittest
from datetime import date

from core.errors import ValidationError
from core.forms import blank_form, clean_form, form_from_record, validate_required
from core.resources import BANNER, NEWS_EVENT, PUBLIC_NOTICE, RESULT


class FormHelperTests(unittest.TestCase):
    def test_blank_form_defaults(self):
        form = blank_form(BANNER.form_fields)
        self.assertEqual(form["position"], "hero")
        self.assertEqual(form["priority"], 0)
        self.assertIs(form["isActive"], True)
        self.assertEqual(form["targetAudience"], [])
        self.assertEqual(form["title"], "")

    def test_form_from_record_keeps_known_fields(self):
        form = form_from_record(NEWS_EVENT.form_fields, {"title": "Fest", "type": "event", "_id": "1"})
        self.assertEqual(form["title"], "Fest")
        self.assertEqual(form["type"], "event")
        self.assertNotIn("_id", form)

    def test_validate_required_lists_labels(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_required(PUBLIC_NOTICE.form_fields, {"title": "  ", "description": "x"})
        self.assertEqual(ctx.exception.missing, ["Title", "Publish date"])
        validate_required(PUBLIC_NOTICE.form_fields, {"title": "T", "description": "D", "publishDate": date(2024, 1, 2)})

    def test_clean_form(self):
        out = clean_form(PUBLIC_NOTICE.form_fields, {
            "title": " Exam notice ", "publishDate": date(2024, 1, 2), "tags": "exam, , neet",
            "isActive": 0, "unknown": "dropped",
        })
        self.assertEqual(out, {"title": "Exam notice", "publishDate": "2024-01-02",
                               "tags": ["exam", "neet"], "isActive": False})

    def test_result_numbers_cast(self):
        out = clean_form(RESULT.form_fields, {"rank": 3.0, "totalMarks": "512.5", "rollNo": " 7 "})
        self.assertEqual(out, {"rank": 3, "totalMarks": 512.5, "rollNo": "7"})
