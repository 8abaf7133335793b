"""
Input Handler - Translates key presses to session intents.
This is a THIN ADAPTER - no game logic here.
"""
import pygame

from lane_rush.gameplay.session import Session, GamePhase


LANE_KEYS = {
    pygame.K_LEFT: -1,
    pygame.K_a: -1,
    pygame.K_RIGHT: 1,
    pygame.K_d: 1,
}

START_KEYS = (pygame.K_RETURN, pygame.K_SPACE)


class InputHandler:
    """
    Handles keyboard input and translates it to session calls.
    """

    def __init__(self, session: Session):
        self.session = session

    def handle_key(self, key: int) -> bool:
        """
        Handle a single key press.
        Returns True if the game should quit.
        """
        phase = self.session.phase

        if key == pygame.K_ESCAPE:
            # First Escape abandons a running round, the next one quits
            if phase == GamePhase.RUNNING:
                self.session.exit()
                return False
            return True

        if key in LANE_KEYS:
            self.session.request_lane_change(LANE_KEYS[key])
        elif key in START_KEYS and phase != GamePhase.RUNNING:
            self.session.start()

        return False
