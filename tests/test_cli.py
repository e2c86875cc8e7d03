"""Unit tests for the command line entry point (jamba_quickstart.cli).

Tests cover:
- Argument parsing (mutually exclusive sources, repeated --set)
- Generating from a local template into an output directory
- --list preview mode
- Values file merged with --set overrides
- Error reporting and exit codes
- Remote version download through HttpTemplateFetcher
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from conftest import read_zip
from jamba_quickstart.cli import build_parser, main


@pytest.fixture
def template_file(tmp_path: Path, template_zip: bytes) -> Path:
    path = tmp_path / "plugin-local.zip"
    path.write_bytes(template_zip)
    return path


@pytest.fixture(autouse=True)
def clean_env():
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestBuildParser:
    @pytest.mark.unit
    def test_requires_a_source(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--set", "name=Foo"])

    @pytest.mark.unit
    def test_sources_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--jamba-version", "v6", "--template", "t.zip"])

    @pytest.mark.unit
    def test_repeated_set(self):
        args = build_parser().parse_args(
            ["--jamba-version", "v6", "--set", "name=Foo", "--set", "company=Acme"]
        )
        assert args.assignments == ["name=Foo", "company=Acme"]
        assert args.list is False


class TestMain:
    @pytest.mark.unit
    def test_generate_from_local_template(self, template_file: Path, tmp_path: Path):
        out = tmp_path / "out"
        code = main(
            ["--template", str(template_file), "--set", "name=Foo", "--set", "company=Acme", "-o", str(out)]
        )
        assert code == 0
        files = read_zip((out / "Foo-src.zip").read_bytes())
        assert "Foo-src/src/cpp/Foo.h" in files
        assert b"project(Acme_Foo)" in files["Foo-src/CMakeLists.txt"]
        assert b"JAMBA_GIT_HASH \"local\"" in files["Foo-src/CMakeLists.txt"]

    @pytest.mark.unit
    def test_git_hash_override(self, template_file: Path, tmp_path: Path):
        code = main(
            ["--template", str(template_file), "--set", "name=Foo", "--git-hash", "deadbeef", "-o", str(tmp_path)]
        )
        assert code == 0
        files = read_zip((tmp_path / "Foo-src.zip").read_bytes())
        assert b"JAMBA_GIT_HASH \"deadbeef\"" in files["Foo-src/CMakeLists.txt"]

    @pytest.mark.unit
    def test_local_template_without_git_hash_warns(self, template_file: Path, tmp_path: Path):
        with patch("jamba_quickstart.cli.print_warning") as mock_warning:
            code = main(["--template", str(template_file), "--set", "name=Foo", "-o", str(tmp_path)])
        assert code == 0
        mock_warning.assert_called_once()
        assert "--git-hash" in mock_warning.call_args[0][0]

    @pytest.mark.unit
    def test_no_warning_with_git_hash(self, template_file: Path, tmp_path: Path):
        with patch("jamba_quickstart.cli.print_warning") as mock_warning:
            main(["--template", str(template_file), "--set", "name=Foo", "--git-hash", "abc", "-o", str(tmp_path)])
        mock_warning.assert_not_called()

    @pytest.mark.unit
    def test_output_dir_from_env(self, template_file: Path, tmp_path: Path):
        with patch.dict(os.environ, {"JQ_OUTPUT_DIR": str(tmp_path / "env-out")}):
            code = main(["--template", str(template_file), "--set", "name=Foo"])
        assert code == 0
        assert (tmp_path / "env-out" / "Foo-src.zip").exists()

    @pytest.mark.unit
    def test_values_file_with_override(self, template_file: Path, tmp_path: Path):
        values = tmp_path / "plugin.yaml"
        values.write_text("name: Foo\ncompany: Acme\nenable_audio_unit: true\n")
        code = main(
            ["--template", str(template_file), "--values", str(values), "--set", "name=Bar", "-o", str(tmp_path)]
        )
        assert code == 0
        files = read_zip((tmp_path / "Bar-src.zip").read_bytes())
        assert b"project(Acme_Bar)" in files["Bar-src/CMakeLists.txt"]
        assert b"JAMBA_ENABLE_AUDIO_UNIT \"\" ON" in files["Bar-src/CMakeLists.txt"]

    @pytest.mark.unit
    def test_list_mode(self, template_file: Path, tmp_path: Path):
        out = tmp_path / "list-out"
        code = main(["--template", str(template_file), "--set", "name=Foo", "--list", "-o", str(out)])
        assert code == 0
        assert not out.exists()

    @pytest.mark.unit
    def test_missing_name(self, template_file: Path, tmp_path: Path):
        with patch("jamba_quickstart.cli.print_error") as mock_error:
            code = main(["--template", str(template_file), "-o", str(tmp_path)])
        assert code == 1
        assert "name" in mock_error.call_args[0][0]
        assert not list(tmp_path.glob("*-src.zip"))

    @pytest.mark.unit
    def test_missing_template_file(self, tmp_path: Path):
        with patch("jamba_quickstart.cli.print_error") as mock_error:
            code = main(["--template", str(tmp_path / "nope.zip"), "--set", "name=Foo"])
        assert code == 1
        assert "nope.zip" in mock_error.call_args[0][0]

    @pytest.mark.unit
    def test_invalid_template(self, tmp_path: Path):
        bad = tmp_path / "bad.zip"
        bad.write_bytes(b"garbage")
        code = main(["--template", str(bad), "--set", "name=Foo"])
        assert code == 1

    @pytest.mark.unit
    def test_bad_assignment(self, template_file: Path):
        assert main(["--template", str(template_file), "--set", "oops"]) == 1

    @pytest.mark.unit
    def test_remote_version(self, template_zip: bytes, tmp_path: Path):
        with patch(
            "jamba_quickstart.cli.HttpTemplateFetcher.fetch",
            new=AsyncMock(return_value=template_zip),
        ) as mock_fetch:
            code = main(["--jamba-version", "v6.0.0", "--set", "name=Foo", "-o", str(tmp_path)])
        assert code == 0
        mock_fetch.assert_awaited_once_with("v6.0.0")
        files = read_zip((tmp_path / "Foo-src.zip").read_bytes())
        assert b"JAMBA_GIT_HASH \"v6.0.0\"" in files["Foo-src/CMakeLists.txt"]
