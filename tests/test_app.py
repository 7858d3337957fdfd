from __future__ import annotations

import json
import logging

import pytest

import app
import settings
from core.errors import SourceUnavailableError


class RecordingReporter:
    def __init__(self) -> None:
        self.notices: list[tuple[str, str, str]] = []
        self.summaries: list[list] = []
        self.reports: list = []

    def notice(self, level: str, title: str, text: str) -> None:
        self.notices.append((level, title, text))

    def rules_summary(self, rules) -> None:
        self.summaries.append(list(rules))

    def report(self, result, title: str) -> None:
        self.reports.append(result)


class StubSource:
    instances: list["StubSource"] = []
    diffs: dict[str, str] = {}
    fail = False

    def __init__(self, cwd=None, excluded_paths=()) -> None:
        self.excluded_paths = list(excluded_paths)
        self.calls = 0
        StubSource.instances.append(self)

    async def list_staged_files(self) -> list[str]:
        self.calls += 1
        if StubSource.fail:
            raise SourceUnavailableError(["git", "diff"], "fatal: not a git repository")
        return list(StubSource.diffs)

    async def fetch_diff(self, path: str) -> str:
        return StubSource.diffs[path]


@pytest.fixture(autouse=True)
def stub_source(monkeypatch):
    StubSource.instances = []
    StubSource.diffs = {"./problem.js": "@@ -1 +2 @@\n+what a beautiful FIXME here!\n"}
    StubSource.fail = False
    monkeypatch.setattr(app, "GitStagedFileSource", StubSource)
    return StubSource


def _config(tmp_path, rules, display=None) -> str:
    payload = {"rules": rules}
    if display is not None:
        payload["display"] = display
    path = tmp_path / "checks.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_blocking_match_exits_with_one(tmp_path) -> None:
    path = _config(tmp_path, [{"message": "Unfinished", "regex": "FIXME"}])
    reporter = RecordingReporter()

    assert app.main(["--config", path], reporter=reporter) == 1
    assert reporter.reports[0].blocking_groups[0].message == "Unfinished"


def test_non_blocking_match_exits_with_zero(tmp_path) -> None:
    path = _config(tmp_path, [{"message": "Unfinished", "regex": "FIXME", "nonBlocking": True}])
    reporter = RecordingReporter()

    assert app.main(["--config", path, "run"], reporter=reporter) == 0
    assert reporter.reports[0].warning_groups[0].message == "Unfinished"


def test_config_file_is_excluded_from_scanning(tmp_path) -> None:
    path = _config(tmp_path, [{"message": "m", "regex": "FIXME"}])

    app.main(["--config", path], reporter=RecordingReporter())

    excluded = StubSource.instances[0].excluded_paths
    assert len(excluded) == 1
    assert excluded[0].endswith("checks.json")


def test_invalid_pattern_fails_before_git_runs(tmp_path) -> None:
    path = _config(
        tmp_path,
        [{"message": "ok", "regex": "FIXME"}, {"message": "Broken", "regex": "(unclosed"}],
    )
    reporter = RecordingReporter()

    assert app.main(["--config", path], reporter=reporter) == app.EX_DATAERR
    assert StubSource.instances == []
    assert reporter.notices[-1][0] == "error"
    assert "Broken" in reporter.notices[-1][2]


def test_malformed_config_exits_with_data_error(tmp_path) -> None:
    path = tmp_path / "checks.json"
    path.write_text("{oops", encoding="utf-8")
    reporter = RecordingReporter()

    assert app.main(["--config", str(path)], reporter=reporter) == app.EX_DATAERR
    assert reporter.notices[-1][0] == "error"


def test_source_failure_exits_with_unavailable(tmp_path) -> None:
    StubSource.fail = True
    path = _config(tmp_path, [{"message": "m", "regex": "FIXME"}])
    reporter = RecordingReporter()

    assert app.main(["--config", path], reporter=reporter) == app.EX_UNAVAILABLE
    assert reporter.reports == []


def test_missing_configuration_exits_successfully(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(settings.CONFIG_ENV, raising=False)
    reporter = RecordingReporter()

    assert app.main([], reporter=reporter) == 0
    assert reporter.notices[0][0] == "warning"
    assert StubSource.instances == []


def test_no_staged_files_exits_successfully(tmp_path) -> None:
    StubSource.diffs = {}
    path = _config(tmp_path, [{"message": "m", "regex": "FIXME"}])
    reporter = RecordingReporter()

    assert app.main(["--config", path], reporter=reporter) == 0
    assert reporter.reports == []
    assert reporter.notices[0][0] == "warning"


def test_rules_command_prints_summary_without_scanning(tmp_path) -> None:
    path = _config(tmp_path, [{"message": "m", "regex": "FIXME"}])
    reporter = RecordingReporter()

    assert app.main(["--config", path, "rules"], reporter=reporter) == 0
    assert [rule.message for rule in reporter.summaries[0]] == ["m"]
    assert StubSource.instances == []


def test_exit_code_mapping() -> None:
    assert app.exit_code_for_error(SourceUnavailableError(["git"], "x")) == app.EX_UNAVAILABLE


def test_non_utf8_config_exits_with_data_error(tmp_path) -> None:
    path = tmp_path / "checks.json"
    path.write_bytes(b'{"rules": [{"message": "m", "regex": "\xff"}]}')
    reporter = RecordingReporter()

    assert app.main(["--config", str(path)], reporter=reporter) == app.EX_DATAERR
    assert reporter.notices[-1][0] == "error"


def test_unexpected_error_is_logged_and_propagates(tmp_path, monkeypatch, caplog) -> None:
    def explode(args, reporter=None):
        raise RuntimeError("kaboom")

    # Keep caplog's handler on the root logger.
    monkeypatch.setattr(app, "_configure_logging", lambda verbose: None)
    monkeypatch.setattr(app, "_run", explode)
    caplog.set_level(logging.ERROR, logger="app")

    with pytest.raises(RuntimeError, match="kaboom"):
        app.main(["--config", str(tmp_path / "checks.json")], reporter=RecordingReporter())

    record = caplog.records[-1]
    assert record.getMessage() == "Pre-commit checks failed due to unexpected error."
    assert record.exc_info is not None


def test_notifications_setting_is_reported_as_ignored(tmp_path, monkeypatch, caplog) -> None:
    monkeypatch.setattr(app, "_configure_logging", lambda verbose: None)
    caplog.set_level(logging.DEBUG, logger="app")
    path = _config(tmp_path, [{"message": "m", "regex": "nothing"}], display={"notifications": True})

    assert app.main(["--config", path], reporter=RecordingReporter()) == 0
    assert any("notifications is ignored" in record.getMessage() for record in caplog.records)
