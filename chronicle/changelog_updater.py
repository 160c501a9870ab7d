#!/usr/bin/env python3
from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from chronicle.file_scribe import FileScribe
from chronicle.git_runner import GitRunner

COMMIT_MESSAGE_TEMPLATE = "chore(release): {tag}"


class ChangelogUpdateError(Exception):
    """CHANGELOG 更新処理で発生するエラーの基底クラス。"""


class MissingReleaseTagError(ChangelogUpdateError):
    """リリースタグファイルが空、存在しない、または読み込めない。"""


class FragmentVersionMismatchError(ChangelogUpdateError):
    """入力側の CHANGELOG にリリースタグの見出しが含まれていない。"""


class UpdateResult(enum.Enum):
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class UpdateChangelogOptions:
    """CHANGELOG 更新の入力。パスはいずれも作業ディレクトリからの相対パス。

    Attributes:
        input_changelog: 今回のリリース分の CHANGELOG (例: dist/changelog.md)
        output_changelog: 先頭に追記されるプロジェクトの CHANGELOG (例: CHANGELOG.md)
        release_tag_file: リリースバージョンが書かれたファイル (例: dist/releasetag.txt)
    """

    input_changelog: str | Path
    output_changelog: str | Path
    release_tag_file: str | Path


def version_marker(release_tag: str) -> str:
    """CHANGELOG 内でバージョンを探すための文字列 `[<tag>]` を返す。"""
    return f"[{release_tag}]"


def merge_changelog(fragment: str, changelog: str) -> str:
    """今回の変更履歴を既存の CHANGELOG の先頭に空行 1 行を挟んで連結する。"""
    return fragment.rstrip() + "\n\n" + changelog.lstrip()


class ChangelogUpdater:
    """リリースごとの変更履歴をプロジェクトの CHANGELOG の先頭に追記し、コミットする。

    ヘッダーのない conventional-changelog 形式の CHANGELOG を前提とする。
    ファイル操作・git 操作・メッセージ出力は差し替え可能。
    """

    def __init__(
        self,
        scribe: FileScribe | None = None,
        git: GitRunner | None = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        self.scribe = scribe if scribe is not None else FileScribe()
        self.git = git if git is not None else GitRunner()
        self.notify = notify

    def update(
        self, working_directory: str | Path, options: UpdateChangelogOptions
    ) -> UpdateResult:
        """入力の変更履歴を CHANGELOG に追記してコミットする。

        CHANGELOG に同じバージョンの見出しが既にある場合は何もしない。

        Args:
            working_directory: git リポジトリのディレクトリ
            options: 入出力ファイルのパス

        Returns:
            UpdateResult: 追記した場合は UPDATED、既存のため飛ばした場合は SKIPPED

        Raises:
            MissingReleaseTagError: リリースタグが取得できない場合
            FragmentVersionMismatchError: 入力の変更履歴がリリースタグと一致しない場合
            FileNotFoundError: 入力または出力の CHANGELOG が存在しない場合
            UnicodeEncodeError: 変更履歴を既存の CHANGELOG のエンコーディングで
                表せない場合
            subprocess.CalledProcessError: git コマンドが失敗した場合
        """
        cwd = Path(working_directory)
        input_changelog = cwd / options.input_changelog
        output_changelog = cwd / options.output_changelog
        release_tag_file = cwd / options.release_tag_file

        release_tag = self._read_release_tag(release_tag_file)

        fragment = self.scribe.read(input_changelog)
        marker = version_marker(release_tag)
        if marker not in fragment:
            raise FragmentVersionMismatchError(
                f"Supplied version {release_tag} was not found in input changelog "
                f"{input_changelog}. You may want to check its content."
            )

        changelog = self.scribe.read(output_changelog)
        changelog_encoding = self.scribe.encoding
        if marker in changelog:
            self.notify(
                f"Changelog already contains an entry for {release_tag}. "
                "Skipping changelog update."
            )
            return UpdateResult.SKIPPED

        # 既存の CHANGELOG と同じエンコーディングで書き戻す
        self.scribe.write(
            output_changelog,
            merge_changelog(fragment, changelog),
            encoding=changelog_encoding,
        )
        self.git.commit_file(
            cwd,
            options.output_changelog,
            COMMIT_MESSAGE_TEMPLATE.format(tag=release_tag),
        )
        return UpdateResult.UPDATED

    def _read_release_tag(self, release_tag_file: Path) -> str:
        try:
            release_tag = self.scribe.read(release_tag_file).strip()
        except OSError as e:
            raise MissingReleaseTagError(
                f"Unable to read {release_tag_file}. Cannot proceed with "
                "changelog update. Did you run the version bump step?"
            ) from e
        if not release_tag:
            raise MissingReleaseTagError(
                f"Unable to determine version from {release_tag_file}. Cannot "
                "proceed with changelog update. Did you run the version bump step?"
            )
        return release_tag


def update_changelog(
    working_directory: str | Path, options: UpdateChangelogOptions
) -> UpdateResult:
    """既定のファイル操作と git でCHANGELOG を更新する。"""
    return ChangelogUpdater().update(working_directory, options)
