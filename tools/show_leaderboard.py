"""
Leaderboard Viewer
==================

Print the persisted Pixel Rush top list.

Usage:
    python -m tools.show_leaderboard [--path FILE] [--json] [--clear]
"""

from __future__ import annotations

import argparse
import json
import sys

from pixel_rush.rush_core.config_loader import load_config
from pixel_rush.rush_core.leaderboard import JsonFileStore, Leaderboard


def main():
    parser = argparse.ArgumentParser(description="Show the Pixel Rush leaderboard")
    parser.add_argument("--path", type=str, default=None,
                        help="Leaderboard file (default from game_config.yaml)")
    parser.add_argument("--json", action="store_true", help="Print raw JSON")
    parser.add_argument("--clear", action="store_true", help="Erase all records")
    args = parser.parse_args()

    config = load_config()
    path = args.path or config.leaderboard.resolved_path
    board = Leaderboard(
        JsonFileStore(path),
        key=config.leaderboard.key,
        max_entries=config.leaderboard.max_entries
    )

    if args.clear:
        board.clear()
        print(f"Cleared leaderboard in {path}")
        return 0

    records = board.load()

    if args.json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return 0

    print("=" * 50)
    print("PIXEL RUSH LEADERBOARD")
    print("=" * 50)
    if not records:
        print("No scores yet")
    for i, record in enumerate(records, start=1):
        print(f"{i}. {record.name:<16} score={record.score:<6} "
              f"prize={record.prize:<6} time={record.elapsed_ms / 1000:.1f}s")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
