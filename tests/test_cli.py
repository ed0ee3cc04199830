"""Tests for CLI commands."""
import json

import pytest
from pathlib import Path
from unittest.mock import patch

from filemover.cli import (
    EXIT_FATAL,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_PARTIAL,
    build_settings_from_args,
    create_parser,
    main,
)
from filemover.core.config import DEFAULT_HISTORY_DB_NAME, DuplicateExtensionPolicy
from filemover.core.errors import ConfigurationError
from filemover.persistence.database import SQLiteMoveHistory


class TestCLIParsing:
    """Test CLI argument parsing."""

    def test_run_command_basic(self):
        """Test run command basic parsing."""
        parser = create_parser()
        args = parser.parse_args([
            "run",
            "--source", "/input/dir",
            "--dest", "/output/dir",
        ])

        assert args.command == "run"
        assert args.source == Path("/input/dir")
        assert args.dest == Path("/output/dir")
        assert args.config is None
        assert args.db is None
        assert args.dry_run is False

    def test_run_command_full(self):
        """Test run command with every option."""
        parser = create_parser()
        args = parser.parse_args([
            "-v",
            "run",
            "-c", "/etc/filemover.json",
            "--db", "/var/moves.sqlite",
            "--on-duplicate-extension", "error",
            "--dry-run",
        ])

        assert args.verbose is True
        assert args.config == Path("/etc/filemover.json")
        assert args.db == Path("/var/moves.sqlite")
        assert args.duplicate_extensions == "error"
        assert args.dry_run is True

    def test_invalid_policy_rejected(self):
        """Test unknown duplicate policy is a usage error."""
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["run", "--on-duplicate-extension", "first-wins"])

    def test_history_command(self):
        """Test history command parsing."""
        parser = create_parser()
        args = parser.parse_args(["history", "--db", "/library/moves.sqlite", "-n", "5"])

        assert args.command == "history"
        assert args.db == Path("/library/moves.sqlite")
        assert args.limit == 5

    def test_categories_command(self):
        """Test categories command parsing."""
        parser = create_parser()
        args = parser.parse_args(["-q", "categories"])

        assert args.command == "categories"
        assert args.quiet is True


class TestBuildSettingsFromArgs:
    """Test merging config file and flags."""

    @pytest.fixture
    def config_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "filemover.json"
        path.write_text(json.dumps({
            "source_folder": str(tmp_path / "in"),
            "destination_folder": str(tmp_path / "out"),
            "categories": {"Pdf Files": ".pdf"},
        }))
        return path

    def test_flags_only(self, tmp_path: Path):
        args = create_parser().parse_args([
            "run", "--source", str(tmp_path / "in"), "--dest", str(tmp_path / "out"),
        ])

        settings = build_settings_from_args(args)

        assert settings.source_folder == (tmp_path / "in").resolve()
        assert settings.resolve_history_db() == (tmp_path / "out" / DEFAULT_HISTORY_DB_NAME).resolve()

    def test_flags_override_file(self, tmp_path: Path, config_file: Path):
        args = create_parser().parse_args([
            "run", "-c", str(config_file),
            "--dest", str(tmp_path / "elsewhere"),
            "--on-duplicate-extension", "error",
        ])

        settings = build_settings_from_args(args)

        assert settings.source_folder == (tmp_path / "in").resolve()
        assert settings.destination_folder == (tmp_path / "elsewhere").resolve()
        assert settings.categories == {"Pdf Files": ".pdf"}
        assert settings.duplicate_extensions == DuplicateExtensionPolicy.ERROR

    def test_missing_source(self, tmp_path: Path):
        args = create_parser().parse_args(["run", "--dest", str(tmp_path)])

        with pytest.raises(ConfigurationError):
            build_settings_from_args(args)


class TestMain:
    """Test command execution and exit codes."""

    @pytest.fixture
    def source(self, tmp_path: Path) -> Path:
        folder = tmp_path / "in"
        folder.mkdir()
        (folder / "a.docx").write_bytes(b"doc")
        (folder / "b.xlsx").write_bytes(b"sheet")
        (folder / "c.unknownext").write_bytes(b"?")
        return folder

    def test_no_command(self, capsys):
        """Test help is shown without a command."""
        assert main([]) == EXIT_OK
        assert "usage" in capsys.readouterr().out

    def test_run_success(self, tmp_path: Path, source: Path, capsys):
        """Test a clean run exits 0 and prints the summary."""
        dest = tmp_path / "out"

        code = main(["run", "--source", str(source), "--dest", str(dest)])

        assert code == EXIT_OK
        assert (dest / "Documents" / "a.docx").exists()
        assert (dest / "Excel Files" / "b.xlsx").exists()
        assert (source / "c.unknownext").exists()
        err = capsys.readouterr().err
        assert "Move Process Summary" in err
        assert "c.unknownext" in err

    def test_run_missing_source(self, tmp_path: Path, capsys):
        """Test a missing source exits 1 and creates nothing."""
        dest = tmp_path / "out"

        code = main(["-q", "run", "--source", str(tmp_path / "nope"), "--dest", str(dest)])

        assert code == EXIT_FATAL
        assert not dest.exists()
        assert "does not exist" in capsys.readouterr().err

    def test_run_bad_config_file(self, tmp_path: Path):
        """Test an unreadable config file exits 1."""
        assert main(["run", "-c", str(tmp_path / "missing.json")]) == EXIT_FATAL

    def test_run_history_failure_exits_partial(self, tmp_path: Path, source: Path):
        """Test history failures make the exit code 2 but files still move."""
        dest = tmp_path / "out"

        code = main([
            "-q", "run",
            "--source", str(source),
            "--dest", str(dest),
            "--db", str(tmp_path / "missing" / "moves.sqlite"),
        ])

        assert code == EXIT_PARTIAL
        assert (dest / "Documents" / "a.docx").exists()

    def test_run_interrupted(self, tmp_path: Path, source: Path):
        """Test Ctrl+C during a run exits 130 without a traceback."""
        with patch("filemover.services.runner.run_mover", side_effect=KeyboardInterrupt):
            code = main(["-q", "run", "--source", str(source), "--dest", str(tmp_path / "out")])

        assert code == EXIT_INTERRUPTED

    def test_run_dry_run(self, tmp_path: Path, source: Path):
        """Test dry run leaves everything in place."""
        dest = tmp_path / "out"

        code = main(["run", "--source", str(source), "--dest", str(dest), "--dry-run"])

        assert code == EXIT_OK
        assert (source / "a.docx").exists()
        assert not dest.exists()

    def test_run_with_config_file(self, tmp_path: Path, source: Path):
        """Test settings come from the config file."""
        dest = tmp_path / "out"
        config = tmp_path / "filemover.json"
        config.write_text(json.dumps({
            "source_folder": str(source),
            "destination_folder": str(dest),
            "categories": {"Word": ".docx"},
        }))

        assert main(["-q", "run", "-c", str(config)]) == EXIT_OK
        assert (dest / "Word" / "a.docx").exists()
        assert (source / "b.xlsx").exists()

    def test_history_after_run(self, tmp_path: Path, source: Path, capsys):
        """Test history shows what the run recorded."""
        dest = tmp_path / "out"
        main(["-q", "run", "--source", str(source), "--dest", str(dest)])
        capsys.readouterr()

        code = main(["-q", "history", "--db", str(dest / DEFAULT_HISTORY_DB_NAME)])

        assert code == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert any("a.docx\tDocuments" in line for line in lines)

    def test_history_missing_db(self, tmp_path: Path):
        """Test a missing database exits 1."""
        assert main(["history", "--db", str(tmp_path / "none.sqlite")]) == EXIT_FATAL

    def test_history_needs_location(self):
        """Test history without --db or --config exits 1."""
        assert main(["history"]) == EXIT_FATAL

    def test_history_limit(self, tmp_path: Path):
        """Test the limit flag."""
        db = tmp_path / "moves.sqlite"
        SQLiteMoveHistory(db).close()

        assert main(["-q", "history", "--db", str(db), "-n", "1"]) == EXIT_OK

    def test_categories_default(self, capsys):
        """Test the default categories are listed."""
        assert main(["-q", "categories"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Excel Files: .ods,.xls,.xlsm,.xlsx" in out
        assert out.splitlines()[0].startswith("Documents:")

    def test_categories_bad_config(self, tmp_path: Path):
        """Test a malformed category list exits 1."""
        config = tmp_path / "filemover.json"
        config.write_text(json.dumps({
            "source_folder": "/a",
            "destination_folder": "/b",
            "categories": {"Pdf Files": ""},
        }))

        assert main(["categories", "-c", str(config)]) == EXIT_FATAL
