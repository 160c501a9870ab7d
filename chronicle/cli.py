#!/usr/bin/env python3
from __future__ import annotations

import argparse
import subprocess
import sys

from chronicle.changelog_updater import (
    ChangelogUpdateError,
    UpdateChangelogOptions,
    UpdateResult,
    update_changelog,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="今回のリリース分の変更履歴を CHANGELOG の先頭に追記し、"
        "git にコミットします。"
    )
    parser.add_argument(
        "--cwd", default=".", help="作業ディレクトリ (git リポジトリ)"
    )
    parser.add_argument(
        "--input-changelog",
        default="dist/changelog.md",
        help="今回のリリース分の変更履歴 (作業ディレクトリからの相対パス)",
    )
    parser.add_argument(
        "--output-changelog",
        default="CHANGELOG.md",
        help="更新する CHANGELOG (作業ディレクトリからの相対パス)",
    )
    parser.add_argument(
        "--release-tag-file",
        default="dist/releasetag.txt",
        help="リリースバージョンが書かれたファイル (作業ディレクトリからの相対パス)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    options = UpdateChangelogOptions(
        input_changelog=args.input_changelog,
        output_changelog=args.output_changelog,
        release_tag_file=args.release_tag_file,
    )

    try:
        result = update_changelog(args.cwd, options)
    except (ChangelogUpdateError, OSError, UnicodeError) as e:
        print(f"エラー: {e}", file=sys.stderr)
        raise SystemExit(1) from e
    except subprocess.CalledProcessError as e:
        print(f"エラー: git コマンドが失敗しました: {e}", file=sys.stderr)
        if e.stderr:
            print(e.stderr.rstrip(), file=sys.stderr)
        raise SystemExit(1) from e

    if result is UpdateResult.UPDATED:
        print(f"{args.output_changelog} を更新してコミットしました。")


if __name__ == "__main__":
    main()
