"""
Core Game
=========

Main game orchestrator combining spawning, input, collision, merging,
scoring, difficulty and the round lifecycle.

Three triggers mutate state, all on one thread through the Scheduler:
the per-frame step, the repeating spawn timer, and input events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pixel_rush.rush_core.config_loader import GameConfig, get_config
from pixel_rush.rush_core.coin_catalog import Coin, CoinCatalog, get_catalog
from pixel_rush.rush_core.difficulty import DifficultyGovernor
from pixel_rush.rush_core.input_controller import InputController, Player
from pixel_rush.rush_core.leaderboard import Leaderboard, LeaderboardRecord, MemoryStore
from pixel_rush.rush_core.merge_system import MergeResult, MergeSystem
from pixel_rush.rush_core.rules import TerminationRules, collides
from pixel_rush.rush_core.scheduler import Scheduler, TimerHandle
from pixel_rush.rush_core.scoring import ScoreEvent, ScoreTracker
from pixel_rush.rush_core.spawner import CoinSpawner
from pixel_rush.rush_core.state_snapshot import GameSnapshot, SnapshotBuilder


class Phase(Enum):
    """Round phase. Screens are projections of this."""
    IDLE = "idle"
    PLAYING = "playing"
    ENDED = "ended"


_TRANSITIONS = {
    Phase.IDLE: (Phase.PLAYING,),
    Phase.PLAYING: (Phase.ENDED,),
    Phase.ENDED: (Phase.IDLE, Phase.PLAYING),
}


class InvalidTransition(RuntimeError):
    """Raised when a lifecycle call does not fit the current phase."""


@dataclass
class RoundState:
    """Read-only view of the round for presentation layers."""
    score: int
    prize_pool: int
    last_collected_coin: Optional[Coin]
    start_timestamp: Optional[float]
    spawn_interval_ms: int
    phase: Phase


@dataclass
class StepResult:
    """Result of a single simulation step."""
    collected: List[Coin] = field(default_factory=list)
    score_events: List[ScoreEvent] = field(default_factory=list)
    merges: List[MergeResult] = field(default_factory=list)
    delta_score: int = 0
    terminated: bool = False
    termination_reason: str = ""


NamePrompt = Callable[[], Optional[str]]


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Coin spawner (repeating timer, re-armed on difficulty change)
    - Input controller
    - Collision, merge and scoring per frame
    - Termination rules
    - Round lifecycle and leaderboard submission

    One step = one display frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        leaderboard: Optional[Leaderboard] = None,
        name_prompt: Optional[NamePrompt] = None,
        debug: bool = False
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducible spawns.
            scheduler: Virtual-time scheduler. A fresh one if None.
            leaderboard: Results store. In-memory if None.
            name_prompt: Called at round end for the player name. None,
                empty or blank answers fall back to the default name.
            debug: If True, print lifecycle diagnostics.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._debug = debug
        self._name_prompt = name_prompt

        # Initialize subsystems
        self._catalog = get_catalog(config)
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._spawner = CoinSpawner(config, seed, catalog=self._catalog)
        self._scorer = ScoreTracker(config)
        self._merger = MergeSystem(config)
        self._governor = DifficultyGovernor(config)
        self._termination = TerminationRules(config)
        self._player = Player.centered(config)
        self._input = InputController(self._player, config)
        self._snapshot_builder = SnapshotBuilder(config)

        if leaderboard is None:
            leaderboard = Leaderboard(
                MemoryStore(),
                key=config.leaderboard.key,
                max_entries=config.leaderboard.max_entries,
                debug=debug
            )
        self._leaderboard = leaderboard
        self._leaderboard.load()

        # Round state
        self._phase = Phase.IDLE
        self._coins: List[Coin] = []
        self._start_ms: Optional[float] = None
        self._end_ms: Optional[float] = None
        self._merge_flash = False
        self._termination_reason = ""
        self._last_record: Optional[LeaderboardRecord] = None
        self._frames = 0

        # Scheduler handles
        self._frame_handle: Optional[TimerHandle] = None
        self._spawn_handle: Optional[TimerHandle] = None
        self._flash_handle: Optional[TimerHandle] = None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def catalog(self) -> CoinCatalog:
        """Coin catalog."""
        return self._catalog

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def leaderboard(self) -> Leaderboard:
        return self._leaderboard

    @property
    def leaderboard_entries(self) -> List[LeaderboardRecord]:
        """Current top list, best first."""
        return self._leaderboard.entries

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_playing(self) -> bool:
        return self._phase is Phase.PLAYING

    @property
    def player(self) -> Player:
        return self._player

    @property
    def coins(self) -> Tuple[Coin, ...]:
        """Live coins."""
        return tuple(self._coins)

    @property
    def coin_count(self) -> int:
        return len(self._coins)

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def prize_pool(self) -> int:
        """Current prize pool."""
        return self._scorer.prize_pool

    @property
    def last_collected(self) -> Optional[Coin]:
        """Most recently collected or merged coin."""
        return self._merger.last_collected

    @property
    def merge_flash(self) -> bool:
        """True while the merge pulse is showing."""
        return self._merge_flash

    @property
    def spawn_interval_ms(self) -> int:
        return self._governor.interval_ms

    @property
    def frames(self) -> int:
        """Steps run this round."""
        return self._frames

    @property
    def termination_reason(self) -> str:
        """Reason for round end, or empty string."""
        return self._termination_reason

    @property
    def last_record(self) -> Optional[LeaderboardRecord]:
        """Record written at the most recent round end."""
        return self._last_record

    @property
    def elapsed_ms(self) -> float:
        """Round time so far, or total round time once ended."""
        if self._start_ms is None:
            return 0.0
        end = self._end_ms if self._end_ms is not None else self._scheduler.now
        return end - self._start_ms

    @property
    def round_state(self) -> RoundState:
        return RoundState(
            score=self._scorer.score,
            prize_pool=self._scorer.prize_pool,
            last_collected_coin=self._merger.last_collected,
            start_timestamp=self._start_ms,
            spawn_interval_ms=self._governor.interval_ms,
            phase=self._phase
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _transition(self, target: Phase) -> None:
        if target not in _TRANSITIONS[self._phase]:
            raise InvalidTransition(
                f"Cannot go from {self._phase.value} to {target.value}"
            )
        self._phase = target

    def start(self, seed: Optional[int] = None) -> RoundState:
        """
        Start a new round.

        Args:
            seed: New spawn seed. Keeps the current stream if None.

        Returns:
            Initial round state.
        """
        self._transition(Phase.PLAYING)
        self._cancel_handles()

        if seed is not None:
            self._seed = seed
            self._spawner.reset(seed)

        # Reset subsystems
        self._scorer.reset()
        self._merger.reset()
        self._governor.reset()
        self._input.reset()
        self._player = Player.centered(self._config)
        self._input.player = self._player

        # Reset state
        self._coins = []
        self._merge_flash = False
        self._termination_reason = ""
        self._frames = 0
        self._start_ms = self._scheduler.now
        self._end_ms = None

        self._arm_spawn_timer()
        self._schedule_frame()

        if self._debug:
            print(f"[DEBUG] Round started at {self._start_ms:.0f}ms, "
                  f"spawn every {self._governor.interval_ms}ms")

        return self.round_state

    def end(self, reason: str = "ended") -> LeaderboardRecord:
        """
        End the round and submit the result to the leaderboard.

        Args:
            reason: Why the round ended.

        Returns:
            The submitted record.
        """
        self._transition(Phase.ENDED)
        self._cancel_handles()
        self._end_ms = self._scheduler.now
        self._termination_reason = reason
        self._merge_flash = False
        self._coins = []

        record = LeaderboardRecord(
            name=self._resolve_name(),
            score=self._scorer.score,
            elapsed_ms=int(round(self.elapsed_ms)),
            prize=self._scorer.prize_pool
        )
        self._leaderboard.submit(record)
        self._last_record = record

        if self._debug:
            print(f"[DEBUG] Round ended ({reason}): {record}")

        return record

    def return_to_idle(self) -> None:
        """Leave the end screen."""
        self._transition(Phase.IDLE)

    def _resolve_name(self) -> str:
        name = self._name_prompt() if self._name_prompt is not None else None
        if name is None or not name.strip():
            return self._config.leaderboard.default_name
        return name.strip()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _cancel_handles(self) -> None:
        for handle in (self._frame_handle, self._spawn_handle, self._flash_handle):
            if handle is not None:
                handle.cancel()
        self._frame_handle = None
        self._spawn_handle = None
        self._flash_handle = None

    def _arm_spawn_timer(self) -> None:
        if self._spawn_handle is not None:
            self._spawn_handle.cancel()
        self._spawn_handle = self._scheduler.call_repeating(
            self._governor.interval_ms, self.spawn_tick
        )

    def _schedule_frame(self) -> None:
        if self._frame_handle is not None and not self._frame_handle.cancelled:
            return
        self._frame_handle = self._scheduler.request_frame(self._on_frame)

    def _on_frame(self) -> None:
        self._frame_handle = None
        self.step()

    def _flash_merge(self) -> None:
        # A newer merge supersedes the pending clear
        if self._flash_handle is not None:
            self._flash_handle.cancel()
        self._merge_flash = True
        self._flash_handle = self._scheduler.call_later(
            self._config.merge.flash_ms, self._clear_flash
        )

    def _clear_flash(self) -> None:
        self._merge_flash = False
        self._flash_handle = None

    def tick(self, dt_ms: float) -> None:
        """
        Drive the game for one display refresh.

        Args:
            dt_ms: Milliseconds since the previous tick.
        """
        self._scheduler.advance(dt_ms)
        self._scheduler.run_frame()

    # ------------------------------------------------------------------
    # Spawning and input
    # ------------------------------------------------------------------

    def spawn_tick(self) -> Optional[Coin]:
        """
        One spawn attempt.

        Returns:
            The new coin, or None if not playing or at the cap.
        """
        if self._phase is not Phase.PLAYING:
            return None
        coin = self._spawner.spawn(self._coins, self._scheduler.now)
        if coin is not None:
            self._coins.append(coin)
        return coin

    def add_coin(self, coin: Coin) -> None:
        """Place a coin directly, bypassing the spawner and its cap."""
        self._coins.append(coin)

    def make_coin(
        self,
        type_id: str,
        x: float,
        y: float,
        size: Optional[float] = None,
        value: Optional[int] = None
    ) -> Coin:
        """
        Build a coin of a given type at a given position.

        Args:
            type_id: Catalog id.
            x: Left edge.
            y: Top edge.
            size: Diameter. Smallest spawn size if None.
            value: Points value. The type's base value if None.
        """
        coin_type = self._catalog[type_id]
        return Coin(
            id=self._spawner.next_id(type_id, self._scheduler.now),
            type_id=type_id,
            x=x,
            y=y,
            size=size if size is not None else self._config.spawn.size_min,
            value=value if value is not None else coin_type.base_value
        )

    def handle_key(self, key: str) -> bool:
        """Forward a keydown to the input controller while playing."""
        if self._phase is not Phase.PLAYING:
            return False
        return self._input.handle_key(key)

    def touch_start(self, x: float, y: float) -> None:
        if self._phase is Phase.PLAYING:
            self._input.touch_start(x, y)

    def touch_move(self, x: float, y: float) -> None:
        if self._phase is Phase.PLAYING:
            self._input.touch_move(x, y)

    def touch_end(self) -> None:
        self._input.touch_end()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self) -> StepResult:
        """
        Run one frame: collide, score, merge, retune difficulty, check end.

        Collisions are evaluated against the coin list as it was at entry;
        the live list is replaced once the pass completes.

        Returns:
            StepResult for this frame. Empty when not playing.
        """
        if self._phase is not Phase.PLAYING:
            return StepResult()

        snapshot = tuple(self._coins)
        score_before = self._scorer.score
        now = self._scheduler.now
        result = StepResult()
        remaining: List[Coin] = []

        for coin in snapshot:
            if not collides(coin, self._player):
                remaining.append(coin)
                continue

            result.collected.append(coin)
            result.score_events.append(self._scorer.apply_collection(coin))

            merge = self._merger.resolve(
                coin, remaining, merged_id=self._spawner.next_id(coin.type_id, now)
            )
            remaining = list(merge.remaining)
            if merge.is_merge:
                result.merges.append(merge)
                self._flash_merge()
                if self._debug:
                    print(f"[DEBUG] Merge {coin.type_id}: value {merge.merged.value}")

        self._coins = remaining
        self._frames += 1
        result.delta_score = self._scorer.score - score_before

        if result.delta_score and self._governor.update(self._scorer.score):
            self._arm_spawn_timer()
            if self._debug:
                print(f"[DEBUG] Spawn interval -> {self._governor.interval_ms}ms "
                      f"at score {self._scorer.score}")

        term_result = self._termination.check(len(snapshot))
        if term_result.is_over:
            result.terminated = True
            result.termination_reason = term_result.reason
            self.end(term_result.reason)
        else:
            self._schedule_frame()

        return result

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Summary dict for agents and tools."""
        return {
            "score": self._scorer.score,
            "prize_pool": self._scorer.prize_pool,
            "coin_count": len(self._coins),
            "collections": self._scorer.collections,
            "merges": self._merger.merges,
            "spawn_interval_ms": self._governor.interval_ms,
            "elapsed_ms": self.elapsed_ms,
            "phase": self._phase.value,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with player, coins and HUD values.
        """
        coins_data = []
        for coin in self._coins:
            coin_type = self._catalog[coin.type_id]
            coins_data.append({
                "id": coin.id,
                "type_id": coin.type_id,
                "x": coin.x,
                "y": coin.y,
                "size": coin.size,
                "value": coin.value,
                "color": coin_type.color,
                "rgb": coin_type.rgb,
            })

        last = self._merger.last_collected
        return {
            "board_width": self._config.board.width,
            "board_height": self._config.board.height,
            "player": {
                "x": self._player.x,
                "y": self._player.y,
                "size": self._player.size,
            },
            "coins": coins_data,
            "score": self._scorer.score,
            "prize_pool": self._scorer.prize_pool,
            "phase": self._phase.value,
            "merge_flash": self._merge_flash,
            "last_collected": None if last is None else {
                "type_id": last.type_id,
                "value": last.value,
                "size": last.size,
            },
            "elapsed_ms": self.elapsed_ms,
            "spawn_interval_ms": self._governor.interval_ms,
        }
