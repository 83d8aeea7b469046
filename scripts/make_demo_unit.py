from __future__ import annotations

import json
from pathlib import Path


def main():
    root = Path("demo_ws/shop").resolve()
    pkg = root / "src" / "com" / "acme" / "shop"
    out = root / "out" / "com" / "acme" / "shop"
    for p in (pkg, out, root / "WebRoot" / "WEB-INF", root / "test" / "com" / "acme" / "shop"):
        p.mkdir(parents=True, exist_ok=True)

    (pkg / "Cart.java").write_text("public class Cart {}\n", encoding="utf-8")
    (pkg / "CartMapper.xml").write_text("<mapper/>\n", encoding="utf-8")
    (pkg / "mvc.xml").write_text("<mvc/>\n", encoding="utf-8")
    (root / "test" / "com" / "acme" / "shop" / "CartTest.java").write_text("class CartTest {}\n", encoding="utf-8")
    (root / "WebRoot" / "index.jsp").write_text("<html/>\n", encoding="utf-8")

    for name in ("Cart.class", "Cart$1.class", "CartMapper.class"):
        (out / name).write_bytes(b"\xca\xfe\xba\xbe")

    workspace = {
        "units": [
            {
                "name": "shop",
                "content_root": root.as_posix(),
                "source_roots": [(root / "src").as_posix(), (root / "test").as_posix()],
                "test_source_roots": [(root / "test").as_posix()],
                "compiled_output": (root / "out").as_posix(),
            }
        ]
    }
    ws_file = root.parent / "workspace.json"
    ws_file.write_text(json.dumps(workspace, indent=2), encoding="utf-8")

    print(f"Created demo unit at: {root}")
    print(f"Try: python -m patcher.cli plan {pkg} --workspace {ws_file} --dest demo_export --compile")


if __name__ == "__main__":
    main()
