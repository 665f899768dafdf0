"""Tests for schema and Remix app auto-discovery."""

import json
from pathlib import Path

from ramp.discovery import find_app_root, find_schema_file


def _remix_project(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(
        json.dumps({"dependencies": {"@remix-run/react": "^2.0.0"}})
    )
    (root / "prisma").mkdir()
    (root / "prisma" / "schema.prisma").write_text("model A {\n}\n")
    return root


class TestFindSchemaFile:
    def test_found_in_start_dir(self, tmp_path: Path) -> None:
        root = _remix_project(tmp_path / "proj")
        assert find_schema_file(root) == (root / "prisma" / "schema.prisma").resolve()

    def test_found_from_nested_dir(self, tmp_path: Path) -> None:
        root = _remix_project(tmp_path / "proj")
        nested = root / "app" / "routes"
        nested.mkdir(parents=True)
        assert find_schema_file(nested) == (root / "prisma" / "schema.prisma").resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_schema_file(tmp_path) is None


class TestFindAppRoot:
    def test_found_from_nested_dir(self, tmp_path: Path) -> None:
        root = _remix_project(tmp_path / "proj")
        nested = root / "app" / "routes"
        nested.mkdir(parents=True)
        assert find_app_root(nested) == (root / "app").resolve()

    def test_package_without_remix_skipped(self, tmp_path: Path) -> None:
        root = _remix_project(tmp_path / "proj")
        inner = root / "packages" / "lib"
        inner.mkdir(parents=True)
        (inner / "package.json").write_text(json.dumps({"dependencies": {"react": "18"}}))
        assert find_app_root(inner) == (root / "app").resolve()

    def test_invalid_package_json_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{broken")
        assert find_app_root(tmp_path) is None

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_app_root(tmp_path) is None
