import tempfile
import unittest
from pathlib import Path

from patcher.core.errors import ConfigurationError
from patcher.core.fsnodes import node_for_path
from patcher.core.mapper import build_path_result, join_dest, map_paths
from patcher.core.normalizer import normalize_selection
from patcher.core.rules import ExportRules
from patcher.models import BuildUnit, ExportRequest, FileNode


class MapperTestCase(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        root = Path(self._td.name)
        self.root = root

        app = root / "app"
        main = app / "src" / "main" / "java" / "com" / "acme"
        test = app / "src" / "test" / "java" / "com" / "acme"
        web = app / "WebRoot"
        classes = root / "out" / "classes" / "com" / "acme"
        for p in (main, test, web, classes):
            p.mkdir(parents=True)

        for name in ("Foo.java", "FooMapper.xml", "Plain.xml", "_Gen.java", "mvc.xml"):
            (main / name).write_text("x", encoding="utf-8")
        (test / "FooTest.java").write_text("x", encoding="utf-8")
        (web / "index.jsp").write_text("x", encoding="utf-8")
        for name in ("Foo.class", "Foo$1.class", "FooMapper.class", "mvc.class"):
            (classes / name).write_bytes(b"x")

        self.main = main
        self.classes = classes
        self.unit = BuildUnit(
            name="app",
            content_root=str(app),
            source_roots=(str(app / "src" / "main" / "java"), str(app / "src" / "test" / "java")),
            test_source_roots=(str(app / "src" / "test" / "java"),),
            compiled_output=str(root / "out" / "classes"),
        )
        self.dest = "/export/app/"

    def tearDown(self):
        self._td.cleanup()

    def node(self, path):
        return node_for_path(str(path))


class TestStructuredMapping(MapperTestCase):
    def test_mirrors_content_root(self):
        nodes = normalize_selection([self.node(self.root / "app")])
        result = map_paths(nodes, self.unit, self.dest)

        self.assertEqual(len(result), len(nodes))
        self.assertEqual(result.unsettled, ())
        for n, pair in zip(nodes, result):
            rel = n.path[len(self.unit.content_root):]
            self.assertEqual(pair.src, n.path)
            self.assertEqual(pair.dst, "/export/app" + rel)

    def test_excluded_names_only_apply_in_compile_mode(self):
        result = map_paths([self.node(self.main / "mvc.xml")], self.unit, self.dest)
        self.assertEqual(len(result), 1)
        self.assertEqual(result.unsettled, ())

    def test_empty_directory_placeholder(self):
        empty = self.root / "app" / "docs"
        empty.mkdir()
        nodes = normalize_selection([self.node(empty)])
        result = map_paths(nodes, self.unit, self.dest)
        self.assertEqual([p.dst for p in result], ["/export/app/docs"])

    def test_outside_content_root_skipped(self):
        outside = FileNode(path="/elsewhere/readme.txt")
        result = map_paths([outside], self.unit, self.dest)
        self.assertEqual(len(result), 0)

    def test_result_is_read_only(self):
        result = map_paths([self.node(self.main / "Foo.java")], self.unit, self.dest)
        self.assertTrue(result.frozen)
        with self.assertRaises(RuntimeError):
            result.put("/a", "/b")


class TestCompiledMapping(MapperTestCase):
    def test_artifact_fan_out(self):
        foo = self.node(self.main / "Foo.java")
        result = map_paths([foo], self.unit, self.dest, compile_mode=True)

        self.assertEqual(len(result), 3)
        dsts = [p.dst for p in result]
        self.assertEqual(dsts[:2], [
            "/export/app/codebase/com/acme/Foo$1.class",
            "/export/app/codebase/com/acme/Foo.class",
        ])
        self.assertEqual(dsts[2], "/export/app/src/main/java/com/acme/Foo.java")
        self.assertEqual(result.pairs[1].src, str(self.classes / "Foo.class").replace("\\", "/"))
        self.assertEqual([p.dst for p in result if p.src == foo.path], [dsts[2]])

    def test_descriptor_with_artifact(self):
        mapper_xml = self.node(self.main / "FooMapper.xml")
        result = map_paths([mapper_xml], self.unit, self.dest, compile_mode=True)
        self.assertEqual([p.dst for p in result if p.src == mapper_xml.path], [
            "/export/app/codebase/com/acme/FooMapper.xml",
            "/export/app/src/main/java/com/acme/FooMapper.xml",
        ])

    def test_descriptor_without_artifact(self):
        plain = self.node(self.main / "Plain.xml")
        result = map_paths([plain], self.unit, self.dest, compile_mode=True)
        self.assertEqual([p.dst for p in result], ["/export/app/src/main/java/com/acme/Plain.xml"])

    def test_excluded_file_keeps_artifact_pair(self):
        mvc = self.node(self.main / "mvc.xml")
        result = map_paths([mvc], self.unit, self.dest, compile_mode=True)
        self.assertEqual([p.dst for p in result], ["/export/app/codebase/com/acme/mvc.xml"])
        self.assertEqual(result.unsettled, ("mvc.xml",))

    def test_uncompilable_prefix_exports_source_only(self):
        gen = self.node(self.main / "_Gen.java")
        result = map_paths([gen], self.unit, self.dest, compile_mode=True)
        self.assertEqual([p.dst for p in result], ["/export/app/src/main/java/com/acme/_Gen.java"])

    def test_test_sources_are_not_compiled(self):
        t = self.node(self.root / "app" / "src" / "test" / "java" / "com" / "acme" / "FooTest.java")
        result = map_paths([t], self.unit, self.dest, compile_mode=True)
        self.assertEqual(len(result), 1)

    def test_custom_test_classifier(self):
        foo = self.node(self.main / "Foo.java")
        result = map_paths([foo], self.unit, self.dest, compile_mode=True, is_test_source=lambda p: True)
        self.assertEqual(len(result), 1)

    def test_missing_output_root_aborts(self):
        unit = BuildUnit(
            name="app",
            content_root=self.unit.content_root,
            source_roots=self.unit.source_roots,
        )
        nodes = [
            self.node(self.root / "app" / "WebRoot" / "index.jsp"),
            self.node(self.main / "Foo.java"),
            self.node(self.main / "Plain.xml"),
        ]
        with self.assertRaises(ConfigurationError) as ctx:
            map_paths(nodes, unit, self.dest, compile_mode=True)

        self.assertEqual(ctx.exception.unit_name, "app")
        self.assertIn("no output directory", str(ctx.exception))
        self.assertEqual([p.dst for p in ctx.exception.partial], ["/export/app/WebRoot/index.jsp"])

    def test_output_resolver_callback(self):
        calls = []

        def resolver(unit):
            calls.append(unit.name)
            return None

        with self.assertRaises(ConfigurationError):
            map_paths([self.node(self.main / "Foo.java")], self.unit, self.dest,
                      compile_mode=True, resolve_output=resolver)
        self.assertEqual(calls, ["app"])

    def test_custom_exclusions(self):
        rules = ExportRules().with_excluded("Plain.xml")
        plain = self.node(self.main / "Plain.xml")
        result = map_paths([plain], self.unit, self.dest, compile_mode=True, rules=rules)
        self.assertEqual(len(result), 0)
        self.assertEqual(result.unsettled, ("Plain.xml",))

    def test_build_path_result(self):
        src_dir = self.node(self.main)
        request = ExportRequest(
            destination=self.dest,
            compile_mode=True,
            unit=self.unit,
            selection=(src_dir, self.node(self.main / "Foo.java")),
        )
        # the directory collapses onto the explicitly picked file
        result = build_path_result(request)
        self.assertEqual(len(result), 3)
        self.assertEqual(result.unsettled, ())


class TestJoinDest(unittest.TestCase):
    def test_single_separators(self):
        self.assertEqual(join_dest("/out/", "codebase", "/com/acme/", "A.class"), "/out/codebase/com/acme/A.class")
        self.assertEqual(join_dest("C:\\out\\", "/x"), "C:/out/x")


if __name__ == "__main__":
    unittest.main()
