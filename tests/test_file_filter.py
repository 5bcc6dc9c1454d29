"""Tests for ignore rules, extension checks and binary sniffing."""

from __future__ import annotations

from pathlib import Path, PurePath

from sourcesecure.core.file_filter import (
    IgnoreRules,
    glob_to_regex,
    has_scannable_extension,
    is_binary_file,
    normalize_extensions,
)


class TestGlobToRegex:
    """Tests for glob compilation."""

    def test_star_matches_anything(self) -> None:
        assert glob_to_regex("*.lock").search("poetry.lock")

    def test_dot_is_literal(self) -> None:
        assert not glob_to_regex("*.lock").search("poetryxlock")


class TestIgnoreRules:
    """Tests for IgnoreRules matching."""

    def setup_method(self) -> None:
        self.rules = IgnoreRules(
            names=[".git", "node_modules"],
            patterns=[".env.example", "*.lock", "*.log", ".next"],
        )

    def test_exact_name(self) -> None:
        assert self.rules.match("node_modules") == "node_modules"
        assert self.rules.is_ignored("src/.git")

    def test_name_is_not_substring(self) -> None:
        assert not self.rules.is_ignored("my_node_modules_notes.md")

    def test_glob_on_basename(self) -> None:
        assert self.rules.match("deep/dir/yarn.lock") == "*.lock"
        assert self.rules.is_ignored("server.log")

    def test_substring_on_relative_path(self) -> None:
        assert self.rules.match("config/.env.example") == ".env.example"
        assert self.rules.is_ignored("web/.next/cache/file.js")

    def test_not_ignored(self) -> None:
        assert self.rules.match("src/app.py") is None

    def test_accepts_pure_paths(self) -> None:
        assert self.rules.is_ignored(PurePath("a") / "b.lock")


class TestExtensions:
    """Tests for the extension allow-list."""

    def test_normalize(self) -> None:
        assert normalize_extensions(["PY", ".Js", ""]) == frozenset({".py", ".js"})

    def test_allowed(self) -> None:
        exts = normalize_extensions([".py"])
        assert has_scannable_extension(PurePath("a/b.py"), exts)
        assert has_scannable_extension(PurePath("A.PY"), exts)
        assert not has_scannable_extension(PurePath("image.png"), exts)

    def test_no_suffix_allowed(self) -> None:
        exts = normalize_extensions([".py"])
        assert has_scannable_extension(PurePath("Dockerfile"), exts)
        assert has_scannable_extension(PurePath(".env"), exts)

    def test_empty_list_allows_everything(self) -> None:
        assert has_scannable_extension(PurePath("image.png"), frozenset())


class TestBinarySniff:
    """Tests for is_binary_file."""

    def test_text(self, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello\n")
        assert not is_binary_file(path)

    def test_binary(self, tmp_path: Path) -> None:
        path = tmp_path / "a.bin"
        path.write_bytes(b"\x7fELF\x00\x01\x02")
        assert is_binary_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        assert not is_binary_file(tmp_path / "missing")
