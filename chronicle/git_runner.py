#!/usr/bin/env python3
import subprocess
from pathlib import Path


class GitRunner:
    """作業ディレクトリで git コマンドを実行する。"""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def run(self, cwd: str | Path, *args: str) -> str:
        """git コマンドを実行し、標準出力を返す。

        Args:
            cwd: コマンドを実行するディレクトリ
            *args: git に渡す引数

        Returns:
            str: 標準出力

        Raises:
            subprocess.CalledProcessError: 終了コードが 0 以外の場合
        """
        completed = subprocess.run(
            [self.executable, *args],
            cwd=cwd,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
        return completed.stdout

    def commit_file(self, cwd: str | Path, path: str | Path, message: str) -> None:
        """1 ファイルだけをステージしてコミットする。

        既にステージ済みの他の変更はこのコミットに含めない。
        """
        self.run(cwd, "add", "--", str(path))
        self.run(cwd, "commit", "-m", message, "--", str(path))
