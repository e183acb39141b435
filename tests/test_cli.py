import json
import uuid

import pytest
from click.testing import CliRunner

from conftest import UID, AutoTransport, EndingTransport
from copynfc.app import main as app_main
from copynfc.app.session import clear, open_store, scan, write_command
from copynfc.core.tag import CapturedTag, SessionState, TagArchive, TagFamily, TagHandle
from copynfc.core.tag import persistence
from copynfc.core.tag.persistence import SAVED_TAGS_KEY
from copynfc.scripts import copynfc

RECORD_ID = uuid.UUID("6f1d2c3b-4a59-4e6f-8a7b-9c0d1e2f3a4b")


@pytest.fixture
def settings(tmp_path):
    path = tmp_path / "settings.json"
    TagArchive(path).save([
        CapturedTag(
            id=RECORD_ID,
            historical_bytes=None,
            response_data=b"\x01\x02",
            identifier=UID,
            sw1=0x90,
            sw2=0x00,
        )
    ])
    return path


def _fake_transport(monkeypatch, transport):
    monkeypatch.setattr(app_main, "PcscTransport", lambda **kwargs: transport)


# -- app operations --


def test_open_store_saves_after_capture(tmp_path):
    archive = TagArchive(tmp_path / "settings.json")
    store = open_store(archive)
    handle = TagHandle(family=TagFamily.MIFARE, identifier=UID)
    session = scan(store, AutoTransport([handle]))
    assert session.state is SessionState.COMPLETED
    assert archive.load() == [session.record]


def test_write_command_for_saved_tag(settings):
    record, command = write_command(open_store(TagArchive(settings)), "6f1d")
    assert record.id == RECORD_ID
    assert command == bytes.fromhex("A20404155F2A")


def test_clear_removes_saved_tags(settings):
    archive = TagArchive(settings)
    assert clear(archive) == 1
    assert archive.load() == []


# -- command line --


def test_list_empty(tmp_path):
    result = CliRunner().invoke(copynfc, ["--store", str(tmp_path / "s.json"), "--list"])
    assert result.exit_code == 0, result.output
    assert "No tags saved yet" in result.output


def test_list_uses_store_from_environment(settings):
    result = CliRunner().invoke(copynfc, ["-l"], env={"COPYNFC_STORE": str(settings)})
    assert result.exit_code == 0, result.output
    assert str(RECORD_ID) in result.output
    assert "04155f2a5c6780" in result.output
    assert "SW=9000" in result.output


def test_show(settings):
    result = CliRunner().invoke(copynfc, ["--store", str(settings), "--show", "6F1D"])
    assert result.exit_code == 0, result.output
    assert "UID         04155f2a5c6780" in result.output
    assert "Response    01 02" in result.output


def test_write(settings):
    result = CliRunner().invoke(copynfc, ["--store", str(settings), "-w", str(RECORD_ID)])
    assert result.exit_code == 0, result.output
    assert "A2 04 04 15 5F 2A" in result.output


def test_write_unknown_tag(settings):
    result = CliRunner().invoke(copynfc, ["--store", str(settings), "--write", "ffff"])
    assert result.exit_code == 1
    assert "no saved tag matches 'ffff'" in result.output


def test_clear(settings):
    result = CliRunner().invoke(copynfc, ["--store", str(settings), "--clear"])
    assert result.exit_code == 0, result.output
    assert json.loads(settings.read_text())[SAVED_TAGS_KEY] == []


def test_actions_are_exclusive(settings):
    result = CliRunner().invoke(copynfc, ["--store", str(settings), "--list", "--clear"])
    assert result.exit_code == 2
    assert "exclusive" in result.output


def test_scan_saves_tag(monkeypatch, tmp_path):
    path = tmp_path / "settings.json"
    handle = TagHandle(family=TagFamily.MIFARE, identifier=b"\x04\xA1\xB2\xC3")
    _fake_transport(monkeypatch, AutoTransport([handle], response=(b"\xCA\xFE", 0x90, 0x00)))

    result = CliRunner().invoke(copynfc, ["--store", str(path)])
    assert result.exit_code == 0, result.output
    assert "04a1b2c3" in result.output
    (record,) = TagArchive(path).load()
    assert record.identifier == b"\x04\xA1\xB2\xC3"
    assert record.response_data == b"\xCA\xFE"


def test_scan_failure_exits_non_zero(monkeypatch, tmp_path):
    path = tmp_path / "settings.json"
    _fake_transport(monkeypatch, EndingTransport("session timeout"))

    result = CliRunner().invoke(copynfc, ["--store", str(path), "--timeout", "1"])
    assert result.exit_code == 1
    assert "session timeout" in result.output
    assert TagArchive(path).load() == []


def test_show_marks_error_status(tmp_path):
    path = tmp_path / "settings.json"
    record = CapturedTag.create(identifier=UID, response_data=b"", sw1=0x6A, sw2=0x82)
    TagArchive(path).save([record])
    result = CliRunner().invoke(copynfc, ["--store", str(path), "--show", str(record.id)])
    assert result.exit_code == 0, result.output
    assert "SW          6A 82  (error)" in result.output


def test_list_survives_repeated_ids(settings):
    doc = json.loads(settings.read_text())
    doc[SAVED_TAGS_KEY] *= 2
    settings.write_text(json.dumps(doc))
    result = CliRunner().invoke(copynfc, ["--store", str(settings), "--list"])
    assert result.exit_code == 0, result.output
    assert result.output.count(str(RECORD_ID)) == 1


def test_scan_reports_unwritable_store(monkeypatch, tmp_path):
    def refuse(src, dst):
        raise PermissionError("read-only file system")

    handle = TagHandle(family=TagFamily.MIFARE, identifier=UID)
    transport = AutoTransport([handle])
    _fake_transport(monkeypatch, transport)
    monkeypatch.setattr(persistence.os, "replace", refuse)

    result = CliRunner().invoke(copynfc, ["--store", str(tmp_path / "settings.json")])
    assert result.exit_code == 1
    assert "cannot write" in result.output
    assert transport.invalidated == 1
