"""Tests for the operation log and the persistent logbook."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

import architect.runtime as runtime_mod
from architect.runtime.crypto import digest
from architect.runtime.logbook import (
    OperationLog,
    build_record,
    format_entry,
    read_logbook,
    record_build,
    show_logbook,
)


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_format_entry_stamps_and_strips_leading_whitespace():
    moment = datetime(2024, 5, 6, 7, 8, 9)

    entry = format_entry("  first line\n\t  second line\nthird", moment)

    assert entry == "at 07:08:09:\n\nfirst line\nsecond line\nthird"


def test_operation_log_appends_in_order(fixed_clock):
    log = OperationLog(fixed_clock)

    log.log("one")
    log.log("two")

    assert len(log) == 2
    assert list(log) == ["at 09:05:07:\n\none", "at 09:05:07:\n\ntwo"]
    assert log[1].endswith("two")
    assert log.messages() == ["one", "two"]

    log.clear()
    assert log.messages() == []


def test_build_record_summarises_units(architect, repository):
    repository.sources["lib/m1.py"] = "x = 1\n"
    repository.sources["lib/libm2.py"] = "y = 2\n"
    architect.build({"repository": "lib", "files": ["m1", "m2"], "exclusions": ["m2"]})

    record = build_record(architect)

    assert record["repository"] == "lib"
    assert record["files"] == ["m1", "libm2"]
    assert record["exclusions"] == ["m2"]
    assert [u["path"] for u in record["units"]] == ["m1", "libm2"]
    assert record["units"][0]["hash"] == digest("x = 1\n")
    assert record["units"][0]["executed"] is True
    assert record["units"][1]["executed"] is False
    assert len(record["hash"]) == 64
    assert record["signature"] is None


def test_record_build_appends_json_lines(temp_dir, architect, repository, capsys):
    repository.sources["/m.py"] = ""
    architect.build({"files": ["m"]})

    record_build(architect)
    record_build(architect, "custom.jsonl")

    lines = (temp_dir / runtime_mod.LOGBOOK_FILE).read_text().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["files"] == ["m"]
    assert (temp_dir / "custom.jsonl").exists()
    assert "Recorded 1 unit(s)" in capsys.readouterr().out


def test_record_build_signs_with_the_runtime_signer(temp_dir, architect, monkeypatch):
    monkeypatch.setattr(runtime_mod, "sign_hash", lambda sha: f"signed:{sha[:6]}")

    entry = record_build(architect, sign=True)

    assert entry["signature"] == f"signed:{entry['hash'][:6]}"
    assert read_logbook()[-1]["signature"] == entry["signature"]


def test_show_logbook_lists_recent_entries(temp_dir, architect, capsys):
    assert show_logbook() == []
    assert "No logbook yet." in capsys.readouterr().out

    record_build(architect)
    record_build(architect)
    capsys.readouterr()

    entries = show_logbook(limit=1)

    out = capsys.readouterr().out
    assert len(entries) == 1
    assert "Architect Logbook — last 1 entries" in out
    assert "(no repository)" in out
    assert "unsigned" in out


def test_sign_and_verify_round_trip(temp_dir):
    pytest.importorskip("cryptography")
    from architect.runtime.crypto import sign_hash, verify_signature

    sha = digest("payload")
    key_file = temp_dir / "key.pem"
    pub_file = temp_dir / "pub.pem"

    signature = sign_hash(sha, key_file=key_file, pub_file=pub_file)

    assert verify_signature(sha, signature, pub_file=pub_file)
    assert not verify_signature(digest("other"), signature, pub_file=pub_file)
    assert sign_hash(sha, key_file=key_file, pub_file=pub_file) != ""


def test_signing_key_is_generated_once_and_reused(temp_dir, capsys):
    pytest.importorskip("cryptography")
    from architect.runtime.crypto import ensure_keypair

    key_file = temp_dir / "key.pem"
    pub_file = temp_dir / "pub.pem"

    first = ensure_keypair(key_file, pub_file)
    assert "Generating architect signing key" in capsys.readouterr().out
    assert key_file.exists() and pub_file.exists()

    second = ensure_keypair(key_file, pub_file)
    assert capsys.readouterr().out == ""
    assert first.private_numbers() == second.private_numbers()


def test_signing_without_cryptography_is_reported(monkeypatch):
    from architect.runtime import crypto

    monkeypatch.setattr(crypto, "serialization", None)

    with pytest.raises(RuntimeError, match="cryptography"):
        crypto.sign_hash(digest("payload"))
