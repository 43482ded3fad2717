import json
import logging
import os
import stat

import pytest

from latex2docx.adapters.pandoc_adapter import (
    ConversionOptions,
    build_pandoc_command,
    find_pandoc,
    pandoc_version,
    require_pandoc,
    resolve_reference_doc,
    run_pandoc,
)
from latex2docx.errors import ConversionError, PandocNotFoundError


def test_default_options_match_journal_settings():
    assert ConversionOptions().to_args() == [
        "--from=latex",
        "--to=docx",
        "--standalone",
        "--number-sections",
        "--toc=false",
    ]


def test_reference_doc_is_appended():
    args = ConversionOptions(reference_doc="ref.docx").to_args()
    assert args[-1] == "--reference-doc=ref.docx"


def test_command_layout():
    cmd = build_pandoc_command("pandoc", "in.tex", "out.docx", ConversionOptions())
    assert cmd[0] == "pandoc"
    assert cmd[-3:] == ["in.tex", "-o", "out.docx"]


def test_missing_pandoc_raises_with_install_hint():
    with pytest.raises(PandocNotFoundError, match="apt-get install pandoc"):
        require_pandoc("definitely-not-a-real-pandoc-binary")
    assert find_pandoc("definitely-not-a-real-pandoc-binary") is None


def test_version_from_first_line(fake_pandoc):
    assert pandoc_version(fake_pandoc) == "3.1.9"


def test_reference_doc_resolution(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_reference_doc() is None
    (tmp_path / "reference-vestnik.docx").write_bytes(b"x")
    assert resolve_reference_doc() == "reference-vestnik.docx"
    assert resolve_reference_doc(str(tmp_path / "other.docx")) is None


def test_run_passes_options_and_writes_output(fake_pandoc, tmp_path, monkeypatch):
    log = tmp_path / "argv.json"
    monkeypatch.setenv("FAKE_PANDOC_LOG", str(log))
    src = tmp_path / "in.tex"
    src.write_text("hello", encoding="utf-8")
    out = tmp_path / "out" / "result.docx"

    result = run_pandoc(fake_pandoc, str(src), str(out), ConversionOptions(reference_doc="ref.docx"))

    assert result.status == "ok"
    assert out.read_text(encoding="utf-8") == "hello"
    argv = json.loads(log.read_text(encoding="utf-8"))
    assert "--number-sections" in argv
    assert "--reference-doc=ref.docx" in argv
    assert os.listdir(out.parent) == ["result.docx"]


def test_failure_leaves_no_output(failing_pandoc, tmp_path):
    src = tmp_path / "in.tex"
    src.write_text("broken input", encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    out = out_dir / "result.docx"

    with pytest.raises(ConversionError) as ei:
        run_pandoc(failing_pandoc, str(src), str(out), ConversionOptions())

    assert ei.value.returncode == 1
    assert "unexpected end of input" in ei.value.stderr
    assert os.listdir(out_dir) == []


def test_failure_keeps_previous_output(failing_pandoc, tmp_path):
    src = tmp_path / "in.tex"
    src.write_text("broken input", encoding="utf-8")
    out = tmp_path / "result.docx"
    out.write_bytes(b"previous")

    with pytest.raises(ConversionError):
        run_pandoc(failing_pandoc, str(src), str(out), ConversionOptions())

    assert out.read_bytes() == b"previous"


def test_output_is_not_owner_only(fake_pandoc, tmp_path):
    src = tmp_path / "in.tex"
    src.write_text("hello", encoding="utf-8")
    out = tmp_path / "result.docx"
    old = os.umask(0o022)
    try:
        run_pandoc(fake_pandoc, str(src), str(out), ConversionOptions())
    finally:
        os.umask(old)
    assert stat.S_IMODE(out.stat().st_mode) == 0o644
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith(".result.")] == []


def test_missing_reference_is_not_a_log_warning(tmp_path, caplog):
    with caplog.at_level(logging.INFO):
        assert resolve_reference_doc(str(tmp_path / "absent.docx")) is None
    assert [r.levelno for r in caplog.records] == [logging.INFO]
