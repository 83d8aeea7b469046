import tempfile
import unittest
from pathlib import Path

from patcher.core.reporting import build_export_message, build_report_html, write_report_html
from patcher.models import PathResult, ValidationResult


def _result():
    result = PathResult()
    result.put("/ws/app/src/A.java", "/exp/app/src/A.java")
    result.put("/ws/out/A.class", "/exp/app/codebase/A.class")
    result.add_unsettled("mvc.xml")
    result.add_unsettled("custom.xml")
    return result.freeze()


class TestReport(unittest.TestCase):
    def test_export_message(self):
        msg = build_export_message(_result(), "/exp/app/")
        self.assertTrue(msg.startswith("Export 2 files. (/exp/app/)"))
        self.assertIn("Warning:", msg)
        self.assertIn("mvc.xml,\ncustom.xml", msg)

    def test_export_message_empty(self):
        msg = build_export_message(PathResult().freeze(), "/exp/app/")
        self.assertEqual(msg, "Export 0 files.")

    def test_report_writes_html(self):
        with tempfile.TemporaryDirectory() as td:
            html_text = build_report_html(
                tool_name="Tool",
                tool_version="0.0",
                unit_name="app",
                destination="/exp/app/",
                compile_mode=True,
                result=_result(),
                validation_results=[ValidationResult("WARNING", "SOMETHING", "<odd>", "/ws/elsewhere/x.txt")],
            )

            path = write_report_html(html_text, str(Path(td) / "report.html"))
            content = Path(path).read_text(encoding="utf-8")
            self.assertIn("<!doctype html>", content.lower())
            self.assertIn("export plan", content.lower())
            self.assertIn("/exp/app/codebase/A.class", content)
            self.assertIn("mvc.xml", content)
            self.assertIn("&lt;odd&gt;", content)
            self.assertIn("/ws/elsewhere/x.txt", content)


if __name__ == "__main__":
    unittest.main()
