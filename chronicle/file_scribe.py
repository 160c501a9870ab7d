#!/usr/bin/env python3
import codecs
import os
import stat
import tempfile
from pathlib import Path

# 変更履歴でよく使われるエンコード。ISO-8859-1 は必ずデコードできるため最後に置く
# utf-8-sig は BOM なしの UTF-8 も読めるので先頭で兼ねる
ENCODINGS = ["utf-8-sig", "shift_jis", "ISO-8859-1"]


class FileScribe:
    """CHANGELOG などのテキストファイルを読み書きするクラス。

    Scribe は日本語で「書記官」を意味する。
    """

    def read(self, filepath: str | Path) -> str:
        """複数エンコーディングで読み込みを試行し、内容を返す。

        読み込めた内容とエンコーディングは `self._content` と
        `self._encoding` にも格納する。BOM 付き UTF-8 の場合、BOM は
        内容から取り除き、エンコーディングを utf-8-sig として記録する。

        Args:
            filepath: 読み込むファイルのパス

        Returns:
            str: ファイルの内容

        Raises:
            FileNotFoundError: ファイルが見つからない場合
            UnicodeDecodeError: いずれのエンコーディングでも読み込めなかった場合
        """
        filepath = Path(filepath).resolve()
        if not filepath.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")
        self._filepath: Path = filepath

        raw = filepath.read_bytes()
        for encoding in ENCODINGS:
            try:
                self._content: str = raw.decode(encoding)
                break
            except UnicodeDecodeError as e:
                last_exception = e
                continue  # 次のエンコーディングを試す
        else:
            # 全てのエンコーディングで失敗した場合エラーの詳細を保持して投げる
            raise UnicodeDecodeError(
                last_exception.encoding,
                last_exception.object,
                last_exception.start,
                last_exception.end,
                f"Unable to read the file with {', '.join(ENCODINGS)} encodings.",
            )

        # BOM のないファイルを書き戻すときに BOM を付けない
        if encoding == "utf-8-sig" and not raw.startswith(codecs.BOM_UTF8):
            encoding = "utf-8"
        self._encoding: str = encoding
        return self._content

    def write(
        self, filepath: str | Path, content: str, encoding: str = "utf-8"
    ) -> None:
        """内容を指定のエンコーディングでファイル全体に上書きする。

        同じディレクトリの一時ファイルに書き出してから置き換えるため、
        途中で失敗しても書きかけのファイルは残らない。

        Args:
            filepath: 書き込み先のパス
            content: 書き込むテキスト
            encoding: 書き込みに使うエンコーディング。読み込んだファイルを
                書き戻すときは `encoding` プロパティの値を渡す

        Raises:
            UnicodeEncodeError: 内容を指定のエンコーディングで表せない場合。
                元のファイルはそのまま残る
        """
        filepath = Path(filepath).resolve()
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
        try:
            # 改行コードを変換しないよう newline="" を指定
            with os.fdopen(fd, "w", encoding=encoding, newline="") as file:
                file.write(content)
            # mkstemp は 0600 で作るので元のパーミッションを引き継ぐ
            if filepath.exists():
                os.chmod(tmp_name, stat.S_IMODE(filepath.stat().st_mode))
            os.replace(tmp_name, filepath)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self._filepath = filepath
        self._encoding = encoding
        self._content = content

    @property
    def filepath(self) -> Path:
        """最後に読み書きしたファイルのパスを返す。

        Raises:
            ValueError: まだパスが設定されていない場合
        """
        if not hasattr(self, "_filepath"):
            raise ValueError("Attribute '_filepath' is not set.")
        return self._filepath

    @property
    def content(self) -> str:
        """最後に読み書きした内容を返す。

        Raises:
            ValueError: まだ内容が設定されていない場合
        """
        if not hasattr(self, "_content"):
            raise ValueError("Attribute '_content' is not set.")
        return self._content

    @property
    def encoding(self) -> str:
        if not hasattr(self, "_encoding"):
            raise ValueError("Attribute '_encoding' is not set.")
        return self._encoding
