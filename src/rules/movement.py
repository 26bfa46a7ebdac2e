"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the reachable squares for each piece type.

Everything here is pseudo-legal: occupancy is respected, but nobody checks whether the mover's own king is left in check.
That is done later by the Board.
"""

from typing import Callable, Iterator, Optional, Protocol

from src.rules.pieces import Color, Piece, PieceType
from src.rules.position import Position
from src.rules.square import Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    en_passant: Optional[Position]

    def square_at(self, position: Position) -> Square: ...


Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_JUMPS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_STEPS: list[Vector] = STRAIGHTS + DIAGONALS


def pawn_capture_deltas(color: Color) -> list[Vector]:
    return [(1, color.forward), (-1, color.forward)]


# --- MOVEMENT RULES ---
def raycasting_move(
    origin: Position, board: Board, directions: list[Vector]
) -> Iterator[Position]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = _mover_color(origin, board)
    for df, dr in directions:
        target = origin.offset(df, dr)
        while target is not None:
            square = board.square_at(target)
            if square.is_occupied:
                # only the first occupied square found counts, and only if it is the opponent's: then it can be captured.
                if not square.holds(player_color):
                    yield target
                break
            yield target
            target = target.offset(df, dr)


def single_step_move(
    origin: Position, board: Board, deltas: list[Vector]
) -> Iterator[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump to a fixed set of squares"""
    player_color = _mover_color(origin, board)
    for df, dr in deltas:
        target = origin.offset(df, dr)
        if target is None:
            continue
        if not board.square_at(target).holds(player_color):
            yield target


def candidate_pawn_moves(origin: Position, board: Board) -> Iterator[Position]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally, or onto the en passant square when an enemy pawn just skipped past it.

    NOTE: Reaching the far rank means promotion. The Board decides what the pawn turns into.
    """
    color = _mover_color(origin, board)

    single = origin.offset(0, color.forward)
    if single is not None and board.square_at(single).is_empty:
        yield single
        double = single.offset(0, color.forward)
        if (
            origin.rank == color.pawn_rank
            and double is not None
            and board.square_at(double).is_empty
        ):
            yield double

    for df, dr in pawn_capture_deltas(color):
        target = origin.offset(df, dr)
        if target is None:
            continue
        if board.square_at(target).holds(~color):
            yield target
        elif target == board.en_passant and _is_en_passant_capture(
            origin, target, board
        ):
            yield target


def _is_en_passant_capture(origin: Position, target: Position, board: Board) -> bool:
    """The pawn being taken stands next to the capturing pawn, on the file of the en passant square."""
    color = _mover_color(origin, board)
    victim = Position(target.file, origin.rank)
    return board.square_at(victim).piece == Piece(PieceType.PAWN, ~color)


def candidate_knight_moves(origin: Position, board: Board) -> Iterator[Position]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(origin, board, KNIGHT_JUMPS)


def candidate_bishop_moves(origin: Position, board: Board) -> Iterator[Position]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(origin, board, DIAGONALS)


def candidate_rook_moves(origin: Position, board: Board) -> Iterator[Position]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(origin, board, STRAIGHTS)


def candidate_queen_moves(origin: Position, board: Board) -> Iterator[Position]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(origin, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(origin: Position, board: Board) -> Iterator[Position]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a separate move (handled by the Board).
    """
    return single_step_move(origin, board, KING_STEPS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], Iterator[Position]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    target: Position,
    by_color: Color,
    by_piece_types: frozenset[PieceType],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered along any direction is an attacker of one of the specified types.
    """
    for df, dr in directions:
        position = target.offset(df, dr)
        while position is not None:
            piece_found = board.square_at(position).piece
            if piece_found is not None:
                if piece_found.color is by_color and piece_found.kind in by_piece_types:
                    return True
                break
            position = position.offset(df, dr)
    return False


def single_step_attack(
    target: Position,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.
    Hence, they also can only attack along a single direction.
    """
    attacker = Piece(by_piece_type, by_color)
    for df, dr in deltas:
        position = target.offset(df, dr)
        if position is not None and board.square_at(position).piece == attacker:
            return True
    return False


def is_attacked_by_pawn(target: Position, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence, vectors are exactly opposite to the capture vectors of `by_color`.

    NOTE: The square does not need to hold a piece. An empty square a pawn could capture onto still counts as attacked.
    """
    inverse_deltas = [(-df, -dr) for df, dr in pawn_capture_deltas(by_color)]
    return single_step_attack(target, by_color, PieceType.PAWN, board, inverse_deltas)


def is_attacked_by_knight(target: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(target, by_color, PieceType.KNIGHT, board, KNIGHT_JUMPS)


def is_attacked_by_king(target: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(target, by_color, PieceType.KING, board, KING_STEPS)


def is_attacked_on_diagonal(target: Position, by_color: Color, board: Board) -> bool:
    """Bishops and the queen"""
    diagonal_sliders = frozenset({PieceType.BISHOP, PieceType.QUEEN})
    return raycasting_attack(target, by_color, diagonal_sliders, board, DIAGONALS)


def is_attacked_on_straight(target: Position, by_color: Color, board: Board) -> bool:
    """Rooks and the queen"""
    straight_sliders = frozenset({PieceType.ROOK, PieceType.QUEEN})
    return raycasting_attack(target, by_color, straight_sliders, board, STRAIGHTS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_by_king,
    is_attacked_on_diagonal,
    is_attacked_on_straight,
]


def _mover_color(origin: Position, board: Board) -> Color:
    piece = board.square_at(origin).piece
    if piece is None:
        raise ValueError(f"No piece on {origin} to move.")
    return piece.color
