import json
import shutil
import tempfile
import unittest
from pathlib import Path

from chess_timer.scope import (
    detect_scope,
    detect_scope_with_details,
    is_valid_scope,
    parse_scope,
    sanitize_project_name,
)


class ScopeDetectionTests(unittest.TestCase):
    def setUp(self) -> None:
        # Outside any git checkout so that parent directories do not leak a project name.
        self._tmp_dir = Path(tempfile.mkdtemp(prefix="chess-timer-scope-"))

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp_dir, ignore_errors=True)

    def _repo(self, name: str) -> Path:
        root = self._tmp_dir / name
        (root / ".git").mkdir(parents=True)
        return root

    def test_package_json_name_wins(self) -> None:
        root = self._repo("checkout")
        (root / "package.json").write_text(json.dumps({"name": "@acme/Brain Jar"}), encoding="utf-8")
        (root / "pyproject.toml").write_text('[project]\nname = "other"\n', encoding="utf-8")

        result = detect_scope_with_details(root)

        self.assertEqual("project:acme-brainjar", result.scope)
        self.assertEqual("package.json", result.source)
        self.assertEqual(root.resolve(), result.git_root)

    def test_pyproject_detected_from_subdirectory(self) -> None:
        root = self._repo("py")
        (root / "pyproject.toml").write_text('[project]\nname = "chess-timer"\n', encoding="utf-8")
        nested = root / "src" / "pkg"
        nested.mkdir(parents=True)

        self.assertEqual("project:chess-timer", detect_scope(nested))

    def test_poetry_and_cargo_and_go_markers(self) -> None:
        poetry = self._repo("poetry")
        (poetry / "pyproject.toml").write_text('[tool.poetry]\nname = "poetic"\n', encoding="utf-8")
        cargo = self._repo("cargo")
        (cargo / "Cargo.toml").write_text('[package]\nname = "crab"\n', encoding="utf-8")
        go = self._repo("go")
        (go / "go.mod").write_text("module github.com/acme/gopher\n\ngo 1.22\n", encoding="utf-8")

        self.assertEqual("project:poetic", detect_scope(poetry))
        self.assertEqual("project:crab", detect_scope(cargo))
        self.assertEqual("project:gopher", detect_scope(go))

    def test_falls_back_to_git_directory_name(self) -> None:
        root = self._repo("My-Repo")
        result = detect_scope_with_details(root)
        self.assertEqual("project:my-repo", result.scope)
        self.assertEqual("git", result.source)

    def test_global_without_project(self) -> None:
        plain = self._tmp_dir / "plain"
        plain.mkdir()
        result = detect_scope_with_details(plain)
        self.assertEqual("global", result.scope)
        self.assertEqual("none", result.source)

    def test_scope_helpers(self) -> None:
        self.assertEqual("scoped-pkg", sanitize_project_name("@Scoped/Pkg"))
        self.assertTrue(is_valid_scope("global"))
        self.assertTrue(is_valid_scope("project:brain-jar"))
        self.assertFalse(is_valid_scope("project:"))
        self.assertFalse(is_valid_scope("project:Bad Name"))
        self.assertFalse(is_valid_scope("team:x"))
        self.assertEqual(("project", "x"), parse_scope("project:x"))
        self.assertEqual(("global", None), parse_scope("whatever"))


if __name__ == "__main__":
    unittest.main()
