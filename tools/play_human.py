"""
Human Play Mode
================

Play Pixel Rush interactively.

Controls:
    - Arrow keys / WASD: Move
    - Mouse drag: Move (1:1 with the pointer)
    - Q: End the current round (window stays open)
    - Enter/Space: Start a round (menu and game-over screens)
    - L: Toggle leaderboard (menu and game-over screens)
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--name NAME]
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from pixel_rush.rush_core.config_loader import load_config, GameConfig
from pixel_rush.rush_core.game import CoreGame, Phase
from pixel_rush.rush_core.leaderboard import JsonFileStore, Leaderboard, LeaderboardRecord


HUD_HEIGHT = 60

END_ROUND_KEY = "q"
START_KEYS = ("return", "enter", "space")
LEADERBOARD_KEY = "l"


def format_elapsed(elapsed_ms: float) -> str:
    """mm:ss.t"""
    total_seconds = max(0.0, elapsed_ms) / 1000.0
    minutes = int(total_seconds // 60)
    seconds = total_seconds - minutes * 60
    return f"{minutes:02d}:{seconds:04.1f}"


def key_command(key_name: str, playing: bool) -> Optional[str]:
    """
    Map a pygame key name to a window command.

    Args:
        key_name: Output of pygame.key.name().
        playing: True while a round is running.

    Returns:
        "quit", "end", "move", "start", "leaderboard" or None.
    """
    key_name = key_name.lower()
    if key_name == "escape":
        return "quit"
    if playing:
        return "end" if key_name == END_ROUND_KEY else "move"
    if key_name in START_KEYS:
        return "start"
    if key_name == LEADERBOARD_KEY:
        return "leaderboard"
    return None


def console_name_prompt() -> Optional[str]:
    """Blocking name prompt on the terminal. Cancel returns None."""
    try:
        return input("Enter your name for the leaderboard: ")
    except (EOFError, KeyboardInterrupt):
        return None


class RushRenderer:
    """
    Draws the board, HUD and phase overlays.
    """

    def __init__(self, config: GameConfig):
        self._config = config
        self._width = config.board.width
        self._height = config.board.height

        self._bg = (31, 41, 55)
        self._hud_bg = (17, 24, 39)
        self._text = (243, 244, 246)
        self._text_dim = (156, 163, 175)
        self._player_color = (59, 130, 246)
        self._flash_color = (250, 204, 21)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 64)
        self._font_medium = pygame.font.Font(None, 32)
        self._font_small = pygame.font.Font(None, 24)

    @property
    def window_size(self):
        return (self._width, self._height + HUD_HEIGHT)

    def render(
        self,
        screen: pygame.Surface,
        render_data: dict,
        leaderboard: List[LeaderboardRecord],
        show_leaderboard: bool,
        last_record: Optional[LeaderboardRecord]
    ) -> None:
        """Render the complete scene."""
        screen.fill(self._bg)
        self._draw_hud(screen, render_data)
        self._draw_coins(screen, render_data)
        self._draw_player(screen, render_data)

        phase = render_data["phase"]
        if show_leaderboard and phase != Phase.PLAYING.value:
            self._draw_leaderboard(screen, leaderboard)
        elif phase == Phase.IDLE.value:
            self._draw_menu(screen)
        elif phase == Phase.ENDED.value:
            self._draw_game_over(screen, last_record)

    def _draw_hud(self, screen: pygame.Surface, render_data: dict) -> None:
        pygame.draw.rect(screen, self._hud_bg, pygame.Rect(0, 0, self._width, HUD_HEIGHT))
        score = self._font_medium.render(f"Score: {render_data['score']}", True, self._text)
        prize = self._font_medium.render(f"Prize: {render_data['prize_pool']}", True, self._text)
        elapsed = self._font_medium.render(format_elapsed(render_data["elapsed_ms"]), True, self._text_dim)
        screen.blit(score, (16, 18))
        screen.blit(prize, (220, 18))
        screen.blit(elapsed, (self._width - elapsed.get_width() - 16, 18))

        last = render_data["last_collected"]
        if last is not None:
            color = self._flash_color if render_data["merge_flash"] else self._text_dim
            chain = self._font_small.render(
                f"Chain: {last['type_id'].upper()} x{last['value']}", True, color
            )
            screen.blit(chain, (420, 22))

    def _draw_coins(self, screen: pygame.Surface, render_data: dict) -> None:
        for coin in render_data["coins"]:
            radius = coin["size"] / 2
            center = (int(coin["x"] + radius), int(coin["y"] + radius + HUD_HEIGHT))
            pygame.draw.circle(screen, coin["rgb"], center, max(1, int(radius)))

    def _draw_player(self, screen: pygame.Surface, render_data: dict) -> None:
        player = render_data["player"]
        rect = pygame.Rect(
            int(player["x"]), int(player["y"] + HUD_HEIGHT),
            int(player["size"]), int(player["size"])
        )
        pygame.draw.rect(screen, self._player_color, rect)
        if render_data["merge_flash"]:
            pygame.draw.rect(screen, self._flash_color, rect.inflate(8, 8), 3)

    def _draw_overlay(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 190))
        screen.blit(overlay, (0, HUD_HEIGHT))

    def _blit_centered(self, screen: pygame.Surface, surface: pygame.Surface, y: int) -> None:
        screen.blit(surface, ((self._width - surface.get_width()) // 2, y))

    def _draw_menu(self, screen: pygame.Surface) -> None:
        self._draw_overlay(screen)
        self._blit_centered(screen, self._font_huge.render("PIXEL RUSH", True, self._text), 220)
        lines = [
            "Collect coins. Same-type coins in a row merge into bigger ones.",
            "Enter to play  -  Q ends a round  -  L for leaderboard  -  ESC to quit",
        ]
        for i, line in enumerate(lines):
            self._blit_centered(screen, self._font_small.render(line, True, self._text_dim), 300 + i * 30)

    def _draw_game_over(self, screen: pygame.Surface, record: Optional[LeaderboardRecord]) -> None:
        self._draw_overlay(screen)
        self._blit_centered(screen, self._font_huge.render("GAME OVER", True, self._text), 220)
        if record is not None:
            summary = (f"{record.name}: {record.score} pts  -  "
                       f"prize {record.prize}  -  {format_elapsed(record.elapsed_ms)}")
            self._blit_centered(screen, self._font_medium.render(summary, True, self._text), 300)
        hint = self._font_small.render("Enter to replay  -  L for leaderboard", True, self._text_dim)
        self._blit_centered(screen, hint, 350)

    def _draw_leaderboard(self, screen: pygame.Surface, records: List[LeaderboardRecord]) -> None:
        self._draw_overlay(screen)
        self._blit_centered(screen, self._font_huge.render("LEADERBOARD", True, self._text), 150)
        if not records:
            self._blit_centered(screen, self._font_medium.render("No scores yet", True, self._text_dim), 240)
        for i, record in enumerate(records):
            line = (f"{i + 1}. {record.name:<12} {record.score:>6}  "
                    f"prize {record.prize:>6}  {format_elapsed(record.elapsed_ms)}")
            self._blit_centered(screen, self._font_medium.render(line, True, self._text), 230 + i * 36)


class HumanPlayer:
    """
    Window, event pump and frame clock around a CoreGame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60,
        player_name: Optional[str] = None,
        leaderboard_path: Optional[str] = None,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps

        path = leaderboard_path or config.leaderboard.resolved_path
        leaderboard = Leaderboard(
            JsonFileStore(path, debug=debug),
            key=config.leaderboard.key,
            max_entries=config.leaderboard.max_entries,
            debug=debug
        )
        if player_name is not None:
            name_prompt = lambda: player_name
        else:
            name_prompt = console_name_prompt

        self._game = CoreGame(
            config=config,
            seed=seed,
            leaderboard=leaderboard,
            name_prompt=name_prompt,
            debug=debug
        )

        # Initialize pygame
        pygame.init()
        self._renderer = RushRenderer(config)
        self._screen = pygame.display.set_mode(self._renderer.window_size)
        pygame.display.set_caption("Pixel Rush")
        self._clock = pygame.time.Clock()

        self._running = True
        self._show_leaderboard = False

    @property
    def game(self) -> CoreGame:
        return self._game

    def run(self) -> int:
        """Run the window loop. Returns the last round's score."""
        print("=== Pixel Rush ===")
        print("Arrows/WASD or drag to move, Enter to start, ESC to quit")
        print()

        self._clock.tick(self._target_fps)
        while self._running:
            self._handle_events()
            dt_ms = self._clock.tick(self._target_fps)
            score_before = self._game.score
            self._game.tick(dt_ms)
            if self._game.is_playing and self._game.score > score_before:
                print(f"  +{self._game.score - score_before} (Total: {self._game.score})")
            self._render()

        if self._game.is_playing:
            self._game.end("quit")
        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                key_name = pygame.key.name(event.key)
                command = key_command(key_name, self._game.is_playing)
                if command == "quit":
                    self._running = False
                elif command == "end":
                    self._end_round()
                elif command == "move":
                    self._game.handle_key(key_name)
                elif command == "start":
                    self._start_round()
                elif command == "leaderboard":
                    self._show_leaderboard = not self._show_leaderboard

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                self._game.touch_start(x, y - HUD_HEIGHT)

            elif event.type == pygame.MOUSEMOTION:
                x, y = event.pos
                self._game.touch_move(x, y - HUD_HEIGHT)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._game.touch_end()

    def _start_round(self) -> None:
        self._show_leaderboard = False
        self._game.start()
        print("\n=== Round Started ===\n")

    def _end_round(self) -> None:
        record = self._game.end("quit")
        print(f"\n=== Round Ended: {record.score} pts ===\n")

    def _render(self) -> None:
        self._renderer.render(
            self._screen,
            self._game.get_render_data(),
            self._game.leaderboard_entries,
            self._show_leaderboard,
            self._game.last_record
        )
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Pixel Rush interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--name", type=str, default=None,
                        help="Leaderboard name (skips the prompt at round end)")
    parser.add_argument("--leaderboard", type=str, default=None,
                        help="Leaderboard file (default from game_config.yaml)")
    parser.add_argument("--debug", action="store_true", help="Print diagnostics")

    args = parser.parse_args()

    if not PYGAME_AVAILABLE:
        print("Error: pygame required. Install: pip install pygame")
        return 1

    config = load_config()
    try:
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            target_fps=args.fps,
            player_name=args.name,
            leaderboard_path=args.leaderboard,
            debug=args.debug
        )
    except pygame.error as e:
        print(f"Error: could not open a window ({e})")
        return 1

    if pygame.display.get_surface() is None:
        print("Error: no display surface available, not starting")
        return 1

    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
