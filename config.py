"""
Game configuration and constants.
"""

# Sides
HUMAN = "Human"
COMPUTER = "Computer"

# Board sizes
BOARD_SIZES = [9, 10, 11]
DEFAULT_BOARD_SIZE = 9
MAX_BOARD_SIZE = max(BOARD_SIZES)

# Dice
DIE_FACES = [1, 2, 3, 4, 5, 6]
MAX_DICE_SUM = 2 * max(DIE_FACES)

# One-die rule: squares ONE_DIE_RULE_START..N must all be covered
ONE_DIE_RULE_START = 7

# Computer dice heuristic: roll one die when allowed and either
# the highest open square is small or few squares remain
ONE_DIE_HIGHEST_SQUARE = 6
ONE_DIE_REMAINING_SQUARES = 3

# The round-over check runs every WIN_CHECK_INTERVAL completed turns
# for fresh rounds; loaded rounds check after every turn.
WIN_CHECK_INTERVAL = 2

# Colors for plotting
COLOR_MAP = {
    "Covered": "#4daf4a",     # green
    "Uncovered": "#d9d9d9",   # light gray
    "Advantage": "#ff7f00",   # orange
}
SIDE_COLORS = {
    HUMAN: "#377eb8",         # blue
    COMPUTER: "#e41a1c",      # red
}

# UI Settings
SELF_PLAY_ROUNDS = 200


class InvalidConfiguration(ValueError):
    """Raised when a setting falls outside the supported set."""


def validate_board_size(size) -> int:
    """Return `size` as an int, or raise InvalidConfiguration."""
    try:
        value = int(size)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"Board size must be an integer, got {size!r}")
    if value not in BOARD_SIZES:
        raise InvalidConfiguration(
            f"Board size must be one of {BOARD_SIZES}, got {value}"
        )
    return value
