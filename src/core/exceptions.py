"""
Exceptions shared across layers.

NOTE: A move that breaks the rules of chess is NOT an exception. Game.apply() returns an IllegalMove result for those.
The errors below are raised for input that cannot even be interpreted, or for misuse of the API.
"""


class ChessError(Exception):
    """Base class for every error raised by this package"""


class NotationError(ChessError, ValueError):
    """A square name / coordinate that does not exist on the board"""


class MoveParseError(ChessError, ValueError):
    """Text that cannot be interpreted as a move attempt"""


class InvalidFENError(ChessError, ValueError):
    """String that is not a valid FEN record"""


class GameOverError(ChessError):
    """Attempting to play on after the game has ended"""


class RepositoryError(ChessError):
    """Persistence layer could not find / store the requested record"""
