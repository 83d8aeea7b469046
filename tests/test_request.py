import unittest

from patcher.core.request import export_prefix, has_errors, validate_export_request
from patcher.models import BuildUnit, FileNode


class TestRequest(unittest.TestCase):
    def test_validate_export_request(self):
        errs = validate_export_request("", [], None)
        codes = {r.code for r in errs}
        self.assertEqual(codes, {"DEST_MISSING", "SELECTION_EMPTY", "UNIT_UNRESOLVED"})
        self.assertTrue(has_errors(errs))

        unit = BuildUnit(name="app", content_root="/ws/app")
        ok = validate_export_request("/out", [FileNode(path="/ws/app/a.txt")], unit)
        self.assertEqual(ok, [])
        self.assertFalse(has_errors(ok))

    def test_selection_outside_content_root_warns(self):
        unit = BuildUnit(name="app", content_root="/ws/app")
        selection = [
            FileNode(path="/ws/app/src/A.java"),
            FileNode(path="/ws/app2/B.java"),
            FileNode(path="/ws/app", is_directory=True),
        ]
        results = validate_export_request("/out", selection, unit)

        self.assertEqual([(r.level, r.code, r.relpath) for r in results], [
            ("WARNING", "OUTSIDE_CONTENT_ROOT", "/ws/app2/B.java"),
        ])
        self.assertFalse(has_errors(results))

    def test_export_prefix(self):
        self.assertEqual(export_prefix("/out", "app"), "/out/app/")
        self.assertEqual(export_prefix("/out/", "app"), "/out/app/")
        self.assertEqual(export_prefix("C:\\out", "app"), "C:/out/app/")


if __name__ == "__main__":
    unittest.main()
