# cli_driver.py
# This file is intended to be run to play the tile board on the CLI

import logging
import random
import time
from typing import Optional

from config import Settings, load_settings
from core import Direction
from session import GameSession

DIRECTION_KEYS = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}

def main(settings: Optional[Settings] = None, input_fn=input):
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    # 1. Initialize game; the best score carries over between games
    session = GameSession(settings.width, settings.height, settings.initial_tiles,
                          rng=random.Random(settings.seed))
    session.new_game()
    display_board_state(session)

    while True:
        quit_requested = play_game(session, settings, input_fn)

        # 5. Game Ended
        print("\n--- Final Board State ---")
        display_board_state(session)
        if quit_requested or not session.game_over:
            break

        print("No more moves possible. Better luck next time!")
        if input_fn("Play again? (Y/N): ").strip().upper() != 'Y':
            break
        session.new_game()
        display_board_state(session)

    return session

def play_game(session: GameSession, settings: Settings, input_fn) -> bool:
    """Runs moves until game over. Returns True if the player quit."""
    # 2. Game Loop
    while not session.game_over:
        move_input = input_fn("Enter move (W/A/S/D for Up/Left/Down/Right, Q to quit): ").strip().upper()

        if move_input == 'Q':
            print("Quitting game.")
            return True

        chosen_direction = DIRECTION_KEYS.get(move_input)
        if chosen_direction is None:
            print("Invalid input. Use W, A, S, D.")
            continue

        # 3. Resolve the move; only an effective move spawns a tile
        outcome = session.move(chosen_direction)
        if not outcome.accepted:
            print("Move did not change the board. Try a different direction.")
            continue

        # 4. Let the board settle, then spawn and check for game over
        if settings.settle_delay > 0:
            time.sleep(settings.settle_delay)
        session.settle()
        display_board_state(session)

    return False

def display_board_state(session: GameSession):
    """Prints the board, score and game status to the console."""
    print(f"\nScore: {session.score}  Best: {session.best_score}")
    print("GAME OVER!" if session.game_over else f"Status: {session.engine.state.name}")

    values = session.engine.values_grid()
    for row in values:
        print("\t".join(str(value) if value else "." for value in row))
    print("-" * (len(values[0]) * 8))

if __name__ == "__main__":
    main()
