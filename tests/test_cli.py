"""
Critical CLI tests: focus on data safety: dry run by default, correct report
selection, and deletion only with explicit flags.
"""
import os
from unittest import mock

import pytest

from reportsweep.cli import CLIApplication
from reportsweep.services.file_store import JsonDirectoryReportStore


@pytest.fixture
def report_dir(tmp_path, scenario_reports):
    store = JsonDirectoryReportStore(str(tmp_path))
    for report in scenario_reports:
        store.save(report)
    return tmp_path


@pytest.fixture
def fake_trash():
    trashed = []

    def _trash(path):
        trashed.append(os.path.basename(path))
        os.remove(path)

    with mock.patch("reportsweep.services.file_store.send2trash", side_effect=_trash):
        yield trashed


def run_cli(*argv):
    app = CLIApplication()
    app.run(list(argv))
    return app


class TestDryRun:

    def test_lists_groups_without_deleting(self, report_dir, fake_trash, capsys):
        run_cli("--store", "dir", "--path", str(report_dir), "--owner", "alice")

        out = capsys.readouterr().out
        assert "Found 1 duplicate groups (2 reports)" in out
        assert "Dry run" in out
        assert fake_trash == []
        assert (report_dir / "alice" / "A.json").exists()

    def test_no_duplicates_message(self, report_dir, capsys):
        run_cli("--path", str(report_dir), "--owner", "alice", "--tolerance", "1m")
        assert "No duplicate groups found." in capsys.readouterr().out

    def test_quiet_prints_nothing(self, report_dir, capsys):
        run_cli("--path", str(report_dir), "--owner", "alice", "--quiet")
        assert capsys.readouterr().out == ""


class TestDeletion:

    def test_delete_force_keeps_newest(self, report_dir, fake_trash, capsys):
        """
        CRITICAL: only the older duplicate (A) is trashed; the newest (B) and
        unrelated reports (C, D) survive.
        """
        run_cli("--path", str(report_dir), "--owner", "alice", "--delete", "--force")

        out = capsys.readouterr().out
        assert fake_trash == ["A.json"]
        assert "[KEEP] B" in out
        assert "[DEL]  A" in out
        assert "Successfully deleted 1 reports" in out
        assert sorted(p.name for p in (report_dir / "alice").iterdir()) == ["B.json", "C.json", "D.json"]

    def test_wider_tolerance_deletes_more(self, report_dir, fake_trash):
        run_cli("--path", str(report_dir), "--owner", "alice", "--tolerance", "2h", "--delete", "--force")
        assert sorted(fake_trash) == ["A.json", "B.json"]

    def test_partial_failure_is_reported(self, report_dir, capsys):
        with mock.patch("reportsweep.services.file_store.send2trash", side_effect=OSError("locked")):
            run_cli("--path", str(report_dir), "--owner", "alice", "--delete", "--force")

        out = capsys.readouterr().out
        assert "Partial success: 0/1 reports deleted." in out
        assert "A: Failed to move to trash: locked" in out

    def test_interactive_confirmation_declined(self, report_dir, fake_trash, capsys):
        with mock.patch("sys.stdin", **{"isatty.return_value": True}), \
                mock.patch("sys.stdout.isatty", return_value=True), \
                mock.patch("builtins.input", return_value="n"):
            run_cli("--path", str(report_dir), "--owner", "alice", "--delete")

        assert "Deletion cancelled by user." in capsys.readouterr().out
        assert fake_trash == []


class TestArgumentValidation:

    def test_force_requires_delete(self, report_dir):
        with pytest.raises(SystemExit) as exc:
            run_cli("--path", str(report_dir), "--force")
        assert exc.value.code == 1

    def test_delete_without_force_in_non_tty(self, report_dir):
        with mock.patch("sys.stdin", **{"isatty.return_value": False}):
            with pytest.raises(SystemExit):
                run_cli("--path", str(report_dir), "--owner", "alice", "--delete")

    def test_dir_store_requires_path(self):
        with pytest.raises(SystemExit):
            run_cli("--store", "dir")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SystemExit):
            run_cli("--path", str(tmp_path / "missing"))

    def test_invalid_tolerance(self, report_dir, capsys):
        with pytest.raises(SystemExit):
            run_cli("--path", str(report_dir), "--tolerance", "soon")
        assert "Invalid tolerance format" in capsys.readouterr().err

    def test_invalid_batch_size(self, report_dir):
        with pytest.raises(SystemExit):
            run_cli("--path", str(report_dir), "--batch-size", "0")

    def test_rest_store_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("REPORTSWEEP_API_KEY", raising=False)
        with pytest.raises(SystemExit):
            run_cli("--store", "rest", "--url", "https://example.supabase.co", "--owner", "u1")

    def test_scan_failure_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli("--path", str(tmp_path), "--owner", "nobody")
        assert exc.value.code == 1
        assert "Scan failed" in capsys.readouterr().err


class TestCreateParams:

    def test_parameters_from_arguments(self, report_dir):
        app = CLIApplication()
        args = app.parse_args([
            "--path", str(report_dir), "--owner", "alice",
            "--tolerance", "30m", "--batch-size", "5", "--pause", "1s", "--legacy-fingerprint",
        ])

        scan_params, cleanup_params = app.create_params(args)

        assert scan_params.tolerance.total_seconds() == 1800
        assert scan_params.owner_scope == "alice"
        assert scan_params.canonical_answers is False
        assert cleanup_params.batch_size == 5
        assert cleanup_params.batch_pause == 1.0

    def test_owner_from_environment(self, report_dir, monkeypatch):
        monkeypatch.setenv("REPORTSWEEP_OWNER", "env-owner")
        app = CLIApplication()

        scan_params, _ = app.create_params(app.parse_args(["--path", str(report_dir)]))

        assert scan_params.owner_scope == "env-owner"
