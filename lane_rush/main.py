#!/usr/bin/env python3
"""
Lane Rush - Main Entry Point

A three-lane arcade dodger. Switch lanes to avoid obstacles, grab power-ups
carrying sports trivia, and survive as long as you can while the road speeds up.

Usage:
    python -m lane_rush.main

Controls:
    Left/A, Right/D: Switch lane
    Enter/Space: Start (or restart after a crash)
    Escape: Abandon the round, press again to quit

Configuration comes from LANE_RUSH_* environment variables (see config.py).
"""
import logging
import random
import time

import pyunicodegame

from lane_rush.config import get_settings
from lane_rush.gameplay.facts import FactProvider
from lane_rush.gameplay.session import Session, GamePhase
from lane_rush.highscore import HighScoreStore
from lane_rush.ui.renderer import Renderer, COLOR_BG
from lane_rush.ui.input_handler import InputHandler

logger = logging.getLogger(__name__)


def clock_ms() -> float:
    """Monotonic frame timestamp in milliseconds."""
    return time.monotonic() * 1000.0


def main():
    """Main entry point."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Content source: fallback facts until the remote pool arrives
    provider = FactProvider(
        base_url=settings.facts_base_url,
        timeout=settings.facts_timeout_seconds,
    )
    if settings.fetch_facts:
        provider.load_in_background()
    else:
        provider = FactProvider.static(provider.fallback)

    high_scores = HighScoreStore(settings.high_score_path)

    renderer = Renderer(settings.screen_width, settings.screen_height, settings.cell_size)
    renderer.best_score = high_scores.load()

    def on_game_over(score: int):
        renderer.best_score = high_scores.record(score)

    width, height = renderer.play_area
    session = Session(
        provider,
        width=width,
        height=height,
        rng=random.Random(settings.seed),
        on_game_over=on_game_over,
        on_publish=renderer.publish,
    )
    input_handler = InputHandler(session)

    pyunicodegame.init(
        "Lane Rush",
        width=settings.screen_width,
        height=settings.screen_height,
        bg=COLOR_BG,
    )
    renderer.init_windows()

    def update(dt: float):
        """Advance the session from the wall clock (dt from the framework is unused)."""
        now_ms = clock_ms()
        session.tick(now_ms)

        # Steps stop at ENDED, so publish the final frame once from here
        shown = renderer.snapshot
        if session.phase == GamePhase.ENDED and (shown is None or shown.phase != GamePhase.ENDED):
            renderer.publish(session.snapshot(now_ms))

    def render():
        renderer.render()

    def on_key(key: int):
        if input_handler.handle_key(key):
            pyunicodegame.quit()

    logger.info("Starting game loop (Escape to quit)")
    pyunicodegame.run(update=update, render=render, on_key=on_key)


if __name__ == "__main__":
    main()
