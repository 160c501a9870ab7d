import codecs
import os
import stat
from pathlib import Path

import pytest

from chronicle.file_scribe import FileScribe


def test_read_success(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_text("## [1.0.0]\n", encoding="utf-8")
    scribe = FileScribe()
    assert scribe.read(test_file) == "## [1.0.0]\n"
    assert scribe.content == "## [1.0.0]\n"
    assert scribe.encoding == "utf-8"
    assert scribe.filepath == test_file.resolve()


def test_read_file_not_found() -> None:
    scribe = FileScribe()
    with pytest.raises(FileNotFoundError):
        scribe.read("non_existent_file.txt")


def test_read_directory_is_not_a_file(tmp_path: Path) -> None:
    scribe = FileScribe()
    with pytest.raises(FileNotFoundError):
        scribe.read(tmp_path)


def test_read_encoding_fallback(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    test_file: Path = tmp_path / "test_sjis.txt"
    test_file.write_text("これはShift-JISのテストです。", encoding="shift_jis")
    scribe = FileScribe()
    assert scribe.read(test_file) == "これはShift-JISのテストです。"
    assert scribe.encoding == "shift_jis"
    # 読み込みに失敗したエンコーディングは出力しない
    assert capsys.readouterr().out == ""


def test_read_latin1_fallback(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_bytes("café\n".encode("ISO-8859-1"))
    scribe = FileScribe()
    assert scribe.read(test_file) == "café\n"
    assert scribe.encoding == "ISO-8859-1"


# BOM は内容から取り除き、書き戻し用に utf-8-sig を記録する
def test_read_strips_bom(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_bytes(codecs.BOM_UTF8 + "## [1.0.0]\n".encode("utf-8"))
    scribe = FileScribe()
    assert scribe.read(test_file) == "## [1.0.0]\n"
    assert scribe.encoding == "utf-8-sig"


def test_write_overwrites(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_text("old content", encoding="utf-8")
    scribe = FileScribe()
    scribe.write(test_file, "new content\n")
    assert test_file.read_bytes() == b"new content\n"
    assert scribe.content == "new content\n"
    assert scribe.filepath == test_file.resolve()
    assert scribe.encoding == "utf-8"


@pytest.mark.parametrize("encoding", ["ISO-8859-1", "shift_jis", "utf-8-sig"])
def test_write_round_trips_encoding(tmp_path: Path, encoding: str) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    if encoding == "ISO-8859-1":
        original = "## [1.0.0]\n\ncafé\n"
    else:
        original = "## [1.0.0]\n\n修正\n"
    test_file.write_bytes(original.encode(encoding))
    scribe = FileScribe()
    content = scribe.read(test_file)
    scribe.write(test_file, content, encoding=scribe.encoding)
    assert test_file.read_bytes() == original.encode(encoding)
    assert scribe.encoding == encoding


def test_write_unencodable_keeps_original(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_bytes(b"caf\xe9\n")
    with pytest.raises(UnicodeEncodeError):
        FileScribe().write(test_file, "日本語\n", encoding="ISO-8859-1")
    assert test_file.read_bytes() == b"caf\xe9\n"
    assert [p.name for p in tmp_path.iterdir()] == ["CHANGELOG.md"]


def test_write_leaves_no_temporary_files(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    FileScribe().write(test_file, "content")
    assert [p.name for p in tmp_path.iterdir()] == ["CHANGELOG.md"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX のパーミッションのみ確認")
def test_write_keeps_permissions(tmp_path: Path) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_text("old", encoding="utf-8")
    test_file.chmod(0o644)
    FileScribe().write(test_file, "new")
    assert stat.S_IMODE(test_file.stat().st_mode) == 0o644


def test_write_failure_keeps_original(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    test_file: Path = tmp_path / "CHANGELOG.md"
    test_file.write_text("original", encoding="utf-8")

    def _fail_replace(src: str, dst: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("chronicle.file_scribe.os.replace", _fail_replace)
    with pytest.raises(OSError, match="disk full"):
        FileScribe().write(test_file, "partial")
    assert test_file.read_text(encoding="utf-8") == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["CHANGELOG.md"]


def test_filepath_property_not_set() -> None:
    scribe = FileScribe()
    with pytest.raises(ValueError, match="Attribute '_filepath' is not set."):
        _ = scribe.filepath


def test_content_property_not_set() -> None:
    scribe = FileScribe()
    with pytest.raises(ValueError, match="Attribute '_content' is not set."):
        _ = scribe.content


def test_encoding_property_not_set() -> None:
    scribe = FileScribe()
    with pytest.raises(ValueError, match="Attribute '_encoding' is not set."):
        _ = scribe.encoding
