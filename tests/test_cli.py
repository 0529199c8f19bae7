from __future__ import annotations

import json
import webbrowser

import pytest

from parish_admin import cli
from parish_admin.cli import build_parser, main
from parish_admin.reporting import FileDelivery


def test_refresh_prints_collection_sizes(make_client, capsys):
    code = main(["refresh"], api=make_client())
    out = capsys.readouterr().out
    assert code == 0
    assert "announcements" in out
    assert "stale" not in out


def test_refresh_marks_stale_collections(make_client, fake_api, capsys):
    fake_api.fail_resource("gallery")
    code = main(["refresh"], api=make_client())
    out = capsys.readouterr().out
    assert code == 0
    assert "gallery_images" in out and "(stale)" in out


def test_export_collection(make_client, delivery, capsys):
    code = main(["export", "ministries", "--format", "json", "--title", "Ministries"], api=make_client(), delivery=delivery)
    assert code == 0
    filename, data = delivery.downloads[0]
    assert filename.startswith("ministries-report-") and filename.endswith(".json")
    doc = json.loads(data)
    assert doc["title"] == "Ministries"
    assert [r["id"] for r in doc["records"]] == ["min-1", "min-2"]
    assert "Saved json report" in capsys.readouterr().out


def test_export_failure_exits_1(make_client, blocked_delivery, capsys):
    code = main(["export", "events", "--format", "pdf"], api=make_client(), delivery=blocked_delivery)
    assert code == 1
    assert "Please allow popups to print the report" in capsys.readouterr().out


def test_parishioner_role_is_refused(make_client, fake_api):
    code = main(["--role", "parishioner", "refresh"], api=make_client())
    assert code == 1
    assert fake_api.calls == []


def test_parser_rejects_unknown_collection():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["export", "videos"])


class ClosingDelivery(FileDelivery):
    closed = 0

    def close(self) -> None:
        ClosingDelivery.closed += 1
        super().close()


@pytest.mark.parametrize("fmt, popups", [("pdf", True), ("pdf", False), ("json", True)])
def test_cli_closes_its_delivery(make_client, tmp_path, monkeypatch, fmt, popups):
    opened = []
    monkeypatch.setattr(webbrowser, "open", lambda uri: opened.append(uri) or popups)
    monkeypatch.setattr(cli, "FileDelivery", ClosingDelivery)
    ClosingDelivery.closed = 0

    code = main(["export", "events", "--format", fmt, "--out", str(tmp_path)], api=make_client())

    assert ClosingDelivery.closed == 1
    assert code == (0 if popups else 1)


def test_cli_pdf_stays_readable_after_exit(make_client, tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr(webbrowser, "open", lambda uri: opened.append(uri) or True)

    code = main(["export", "events", "--format", "pdf", "--out", str(tmp_path)], api=make_client())

    assert code == 0
    printed = list(tmp_path.glob("events-report-*.html"))
    assert len(printed) == 1
    assert opened == [printed[0].as_uri()]
    assert "Easter Vigil" in printed[0].read_text(encoding="utf-8")
