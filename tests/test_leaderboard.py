"""
Tests for the leaderboard and its stores.
"""

import json

import pytest

from pixel_rush.rush_core.game import CoreGame
from pixel_rush.rush_core.leaderboard import (
    JsonFileStore,
    Leaderboard,
    LeaderboardRecord,
    MemoryStore,
)


def record(score, name="p", elapsed_ms=1000, prize=None):
    return LeaderboardRecord(name=name, score=score, elapsed_ms=elapsed_ms,
                             prize=score if prize is None else prize)


@pytest.fixture
def board():
    return Leaderboard(MemoryStore())


@pytest.fixture
def full_board(board):
    for score in (100, 90, 80, 70, 60):
        board.submit(record(score, name=f"s{score}"))
    return board


class TestRanking:
    """Test ordering and truncation."""

    def test_sorted_descending(self, board):
        for score in (50, 90, 10):
            board.submit(record(score))
        assert [r.score for r in board.entries] == [90, 50, 10]

    def test_truncated_to_max(self, full_board):
        full_board.submit(record(65, name="new"))
        scores = [r.score for r in full_board.entries]
        assert scores == [100, 90, 80, 70, 65]

    def test_low_score_dropped(self, full_board):
        before = full_board.entries
        full_board.submit(record(10))
        assert full_board.entries == before

    def test_tie_with_lowest_keeps_existing(self, full_board):
        """Earlier records win ties."""
        full_board.submit(record(60, name="late"))
        assert [r.name for r in full_board.entries][-1] == "s60"

    def test_tie_ordering(self, board):
        board.submit(record(50, name="first"))
        board.submit(record(50, name="second"))
        assert [r.name for r in board.entries] == ["first", "second"]

    def test_qualifies_when_not_full(self, board):
        board.submit(record(50))
        assert board.qualifies(0)

    def test_qualifies_when_full(self, full_board):
        assert full_board.qualifies(61)
        assert not full_board.qualifies(60)

    def test_submit_returns_list(self, board):
        result = board.submit(record(5))
        assert result == board.entries

    def test_invalid_max_entries(self):
        with pytest.raises(ValueError):
            Leaderboard(MemoryStore(), max_entries=0)


class TestPersistence:
    """Test the stored value format and recovery."""

    def test_stored_format(self):
        store = MemoryStore()
        board = Leaderboard(store, key="k")
        board.submit(record(30, name="ada", elapsed_ms=4200, prize=30))
        assert json.loads(store.get("k")) == [
            {"name": "ada", "score": 30, "elapsedMs": 4200, "prize": 30}
        ]

    def test_load_existing(self):
        data = [{"name": "a", "score": 1, "elapsedMs": 1, "prize": 1},
                {"name": "b", "score": 9, "elapsedMs": 1, "prize": 9}]
        board = Leaderboard(MemoryStore({"k": json.dumps(data)}), key="k")
        assert [r.name for r in board.load()] == ["b", "a"]

    @pytest.mark.parametrize("raw", [
        "not json",
        json.dumps({"name": "a"}),
        json.dumps([{"name": "a"}]),
        json.dumps([{"name": "a", "score": "lots", "elapsedMs": 1, "prize": 1}]),
        json.dumps(["string"]),
        '[{"name": "a", "score": 1e400, "elapsedMs": 1, "prize": 1}]',
        '[{"name": "a", "score": Infinity, "elapsedMs": 1, "prize": 1}]',
        "[" * 100000 + "]" * 100000,
    ], ids=["not-json", "object", "missing-fields", "bad-type", "not-records",
            "overflow", "infinity", "deep-nesting"])
    def test_malformed_loads_empty(self, raw):
        board = Leaderboard(MemoryStore({"k": raw}), key="k")
        assert board.load() == []

    def test_malformed_replaced_on_submit(self):
        store = MemoryStore({"k": "{{{"})
        board = Leaderboard(store, key="k")
        board.load()
        board.submit(record(7))
        assert [r.score for r in Leaderboard(store, key="k").load()] == [7]

    def test_game_starts_on_overflowing_store(self, config, scheduler):
        raw = '[{"name": "a", "score": 1e400, "elapsedMs": 1, "prize": 1}]'
        board = Leaderboard(MemoryStore({"k": raw}), key="k")
        game = CoreGame(config=config, seed=1, scheduler=scheduler, leaderboard=board)
        game.start()
        assert game.end().score == 0
        assert [r.score for r in board.load()] == [0]

    def test_clear(self, full_board):
        full_board.clear()
        assert full_board.entries == []
        assert full_board.load() == []


class TestJsonFileStore:
    """Test the file-backed store."""

    def test_round_trip_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "board.json"
        Leaderboard(JsonFileStore(path)).submit(record(42, name="ada"))
        reloaded = Leaderboard(JsonFileStore(path))
        assert [(r.name, r.score) for r in reloaded.load()] == [("ada", 42)]

    def test_missing_file_reads_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "none.json").get("k") is None

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "board.json"
        path.write_text("{ not json")
        store = JsonFileStore(path)
        assert store.get("k") is None
        assert Leaderboard(store, key="k").load() == []
        store.set("k", "[]")
        assert json.loads(path.read_text()) == {"k": "[]"}

    def test_deeply_nested_file_reads_empty(self, tmp_path):
        path = tmp_path / "board.json"
        path.write_text("[" * 100000 + "]" * 100000)
        store = JsonFileStore(path)
        assert store.get("k") is None
        assert Leaderboard(store, key="k").load() == []

    def test_other_keys_preserved(self, tmp_path):
        store = JsonFileStore(tmp_path / "board.json")
        store.set("a", "1")
        store.set("b", "2")
        assert store.get("a") == "1"
        assert store.get("b") == "2"


class TestGameSubmission:
    """Round end writes to the leaderboard."""

    def test_round_end_submits(self, game, on_player):
        game.start()
        game.add_coin(on_player("eth"))
        game.step()
        game.end()
        entries = game.leaderboard_entries
        assert len(entries) == 1
        assert entries[0].score == 20
        assert entries[0].prize == 20
        assert entries[0].name == "Anonymous"


class FailingStore(MemoryStore):
    """Store whose writes always fail."""

    def set(self, key, value):
        raise OSError("disk full")


class TestWriteFailure:
    """A store that cannot be written does not break round end."""

    def test_submit_keeps_entries_in_memory(self):
        board = Leaderboard(FailingStore(), key="k", debug=True)
        result = board.submit(record(40))
        assert [r.score for r in result] == [40]
        assert [r.score for r in board.entries] == [40]

    def test_round_end_completes(self, config, scheduler):
        board = Leaderboard(FailingStore(), key="k")
        game = CoreGame(config=config, seed=1, scheduler=scheduler, leaderboard=board)
        game.start()
        finished = game.end()
        assert game.phase.value == "ended"
        assert game.last_record == finished
        assert game.leaderboard_entries == [finished]

    def test_unwritable_path(self, config, scheduler, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = JsonFileStore(blocker / "sub" / "board.json")
        game = CoreGame(config=config, seed=1, scheduler=scheduler,
                        leaderboard=Leaderboard(store))
        game.start()
        game.end()
        assert game.last_record is not None
        assert game.phase.value == "ended"
