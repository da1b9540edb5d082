"""Per-kind movement rules: pattern validation, path clearance, enumeration.

Every public function takes the moving :class:`Piece` and dispatches on its
``piece_type`` through a lookup table, so adding a rule means adding a table
entry rather than a subclass.

Enumeration has *coverage* semantics: the squares returned by
:func:`get_all_moves` include ones held by a same-colored piece (the square is
defended) and the first obstacle of every sliding ray. Those lists feed the
threat maps; legality is decided by :meth:`Board.can_move_piece`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, PieceType
from chessrules.core.position import Position

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.piece import Piece


KNIGHT_OFFSETS: tuple[Position, ...] = (
    Position(1, -2),
    Position(2, -1),
    Position(2, 1),
    Position(1, 2),
    Position(-1, -2),
    Position(-2, -1),
    Position(-1, 2),
    Position(-2, 1),
)

KING_OFFSETS: tuple[Position, ...] = (
    Position(0, 1),
    Position(1, 0),
    Position(0, -1),
    Position(-1, 0),
    Position(-1, 1),
    Position(-1, -1),
    Position(1, 1),
    Position(1, -1),
)

BISHOP_DIRS: tuple[Position, ...] = (
    Position(-1, 1),
    Position(-1, -1),
    Position(1, 1),
    Position(1, -1),
)
ROOK_DIRS: tuple[Position, ...] = (
    Position(-1, 0),
    Position(1, 0),
    Position(0, -1),
    Position(0, 1),
)
QUEEN_DIRS: tuple[Position, ...] = BISHOP_DIRS + ROOK_DIRS

# Pawn vectors: double push, single push, then the two diagonals.
_PAWN_DIRS: dict[Color, tuple[Position, ...]] = {
    Color.WHITE: (Position(-2, 0), Position(-1, 0), Position(-1, 1), Position(-1, -1)),
    Color.BLACK: (Position(2, 0), Position(1, 0), Position(1, -1), Position(1, 1)),
}

PAWN_FORWARD: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}
BACK_RANK: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}

KING_HOME_FILE = 4
QUEENSIDE_ROOK_FILE = 0
KINGSIDE_ROOK_FILE = 7

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_SLIDING: frozenset[PieceType] = frozenset(
    {PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN}
)


def direction_vectors(piece_type: PieceType, color: Color) -> tuple[Position, ...]:
    """Direction vectors for a kind; only pawns depend on *color*."""
    if piece_type == PieceType.PAWN:
        return _PAWN_DIRS[color]
    return _DIRECTIONS[piece_type]


_DIRECTIONS: dict[PieceType, tuple[Position, ...]] = {
    PieceType.KNIGHT: KNIGHT_OFFSETS,
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
    PieceType.KING: KING_OFFSETS,
}


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# -- Movement patterns ------------------------------------------------------


def _pawn_movement(piece: Piece, board: Board, destination: Position) -> bool:
    source = piece.position
    forward = PAWN_FORWARD[piece.color]
    d_rank = destination.rank - source.rank
    d_file = destination.file - source.file
    target = board.get_piece_at(destination.file, destination.rank)

    if d_file == 0:
        # Pawns never capture straight ahead.
        if target is not None:
            return False
        if d_rank == forward:
            return True
        if d_rank == 2 * forward and source.rank == PAWN_START_RANK[piece.color]:
            return board.get_piece_at(source.file, source.rank + forward) is None
        return False

    if abs(d_file) == 1 and d_rank == forward:
        if target is not None:
            return target.color != piece.color
        return is_en_passant(board, piece, destination)

    return False


def _knight_movement(piece: Piece, board: Board, destination: Position) -> bool:
    distance = Position.manhattan_distance(piece.position, destination)
    return (distance.rank, distance.file) in ((1, 2), (2, 1))


def _bishop_movement(piece: Piece, board: Board, destination: Position) -> bool:
    distance = Position.manhattan_distance(piece.position, destination)
    return distance.rank == distance.file and distance.rank > 0


def _rook_movement(piece: Piece, board: Board, destination: Position) -> bool:
    distance = Position.manhattan_distance(piece.position, destination)
    return (distance.rank == 0) != (distance.file == 0)


def _queen_movement(piece: Piece, board: Board, destination: Position) -> bool:
    return _bishop_movement(piece, board, destination) or _rook_movement(
        piece, board, destination
    )


def _king_movement(piece: Piece, board: Board, destination: Position) -> bool:
    distance = Position.manhattan_distance(piece.position, destination)
    if max(distance.rank, distance.file) == 1:
        return True
    return is_castling_move(board, piece, destination)


_VALIDATORS: dict[PieceType, Callable[[Piece, Board, Position], bool]] = {
    PieceType.PAWN: _pawn_movement,
    PieceType.KNIGHT: _knight_movement,
    PieceType.BISHOP: _bishop_movement,
    PieceType.ROOK: _rook_movement,
    PieceType.QUEEN: _queen_movement,
    PieceType.KING: _king_movement,
}


def is_valid_movement(piece: Piece, board: Board, destination: Position) -> bool:
    """Whether *destination* fits the geometric pattern of *piece*.

    Occupancy of intermediate squares is not considered here, except for the
    pawn rules that are defined by occupancy (pushes, captures, en passant).
    """
    if not Position.within_bounds(destination) or destination == piece.position:
        return False
    return _VALIDATORS[piece.piece_type](piece, board, destination)


# -- Special moves ----------------------------------------------------------


def is_en_passant(board: Board, pawn: Piece, destination: Position) -> bool:
    """A diagonal pawn step onto an empty square behind a pawn that just
    advanced two ranks and now stands beside the capturing pawn."""
    if pawn.piece_type != PieceType.PAWN:
        return False
    source = pawn.position
    if destination.rank - source.rank != PAWN_FORWARD[pawn.color]:
        return False
    if abs(destination.file - source.file) != 1:
        return False
    if board.get_piece_at(destination.file, destination.rank) is not None:
        return False

    prev_move = board.get_prev_move()
    if prev_move is None:
        return False
    prev_src, prev_dst = prev_move
    if prev_dst.rank != source.rank or prev_dst.file != destination.file:
        return False
    if abs(prev_src.rank - prev_dst.rank) != 2 or prev_src.file != prev_dst.file:
        return False

    passed = board.get_piece_at(prev_dst.file, prev_dst.rank)
    return (
        passed is not None
        and passed.piece_type == PieceType.PAWN
        and passed.color != pawn.color
    )


def castling_rook_files(src_file: int, dest_file: int) -> tuple[int, int]:
    """``(rook_from_file, rook_to_file)`` for a castling king move."""
    if dest_file < src_file:
        return QUEENSIDE_ROOK_FILE, dest_file + 1
    return KINGSIDE_ROOK_FILE, dest_file - 1


def is_castling_move(board: Board, king: Piece, destination: Position) -> bool:
    """King moves two files along its own rank toward an unmoved rook.

    Requires: neither piece has moved, every square strictly between them is
    empty, the king is not in check, and neither the square it crosses nor
    the one it lands on is threatened by the opponent.
    """
    if king.piece_type != PieceType.KING or king.has_moved:
        return False
    source = king.position
    home_rank = BACK_RANK[king.color]
    if source != Position(home_rank, KING_HOME_FILE):
        return False
    if destination.rank != home_rank or abs(destination.file - source.file) != 2:
        return False

    rook_file, _ = castling_rook_files(source.file, destination.file)
    rook = board.get_piece_at(rook_file, home_rank)
    if (
        rook is None
        or rook.piece_type != PieceType.ROOK
        or rook.color != king.color
        or rook.has_moved
    ):
        return False

    step = _sign(rook_file - source.file)
    for file in range(source.file + step, rook_file, step):
        if board.get_piece_at(file, home_rank) is not None:
            return False

    if board.is_king_in_check(king.color):
        return False

    for file in (source.file + step, destination.file):
        if board.under_threat(king.color, home_rank, file):
            return False
    return True


# -- Path clearance ---------------------------------------------------------


def _continuous_path_clear(
    piece: Piece, board: Board, destination: Position
) -> Position | None:
    source = piece.position
    step = Position(
        _sign(destination.rank - source.rank), _sign(destination.file - source.file)
    )
    if step == Position(0, 0):
        return None
    current = source + step
    while Position.within_bounds(current):
        if board.get_piece_at(current.file, current.rank) is not None:
            return current
        if current == destination:
            break
        current = current + step
    return None


def _discrete_path_clear(
    piece: Piece, board: Board, destination: Position
) -> Position | None:
    if board.get_piece_at(destination.file, destination.rank) is not None:
        return destination
    return None


def _pawn_path_clear(
    piece: Piece, board: Board, destination: Position
) -> Position | None:
    # Pawn rules are occupancy rules already; an invalid step is a block.
    if is_valid_movement(piece, board, destination):
        return None
    return destination


def is_path_clear(piece: Piece, board: Board, destination: Position) -> Position | None:
    """Position of the first obstacle toward *destination*, else ``None``."""
    if piece.piece_type == PieceType.PAWN:
        return _pawn_path_clear(piece, board, destination)
    if piece.piece_type in _SLIDING:
        return _continuous_path_clear(piece, board, destination)
    return _discrete_path_clear(piece, board, destination)


def can_reach_destination(piece: Piece, board: Board, destination: Position) -> bool:
    """Valid movement and either a clear path or a capture at the destination."""
    if not is_valid_movement(piece, board, destination):
        return False
    obstacle = is_path_clear(piece, board, destination)
    if obstacle is None:
        return True
    if obstacle != destination:
        return False
    occupant = board.get_piece_at(destination.file, destination.rank)
    return occupant is not None and occupant.color != piece.color


# -- Enumeration ------------------------------------------------------------


def _continuous_moves(piece: Piece, board: Board) -> list[Position]:
    source = piece.position
    moves: list[Position] = []
    for direction in direction_vectors(piece.piece_type, piece.color):
        bound = Position.max_distance_along(direction, source)
        if bound == source:
            continue
        obstacle = _continuous_path_clear(piece, board, bound)
        if obstacle is None:
            moves.extend(Position.positions_between_max(direction, source))
        else:
            moves.extend(Position.positions_between(direction, source, obstacle))
            moves.append(obstacle)
    return moves


def _discrete_moves(piece: Piece, board: Board) -> list[Position]:
    moves: list[Position] = []
    for offset in direction_vectors(piece.piece_type, piece.color):
        destination = piece.position + offset
        if Position.within_bounds(destination):
            moves.append(destination)
    return moves


def _pawn_moves(piece: Piece, board: Board) -> list[Position]:
    source = piece.position
    moves: list[Position] = []
    for offset in direction_vectors(PieceType.PAWN, piece.color):
        destination = source + offset
        if not Position.within_bounds(destination):
            continue
        # Diagonals are always covered; pushes only when actually playable.
        if offset.file != 0 or _pawn_movement(piece, board, destination):
            moves.append(destination)
    return moves


_ENUMERATORS: dict[PieceType, Callable[[Piece, Board], list[Position]]] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _discrete_moves,
    PieceType.BISHOP: _continuous_moves,
    PieceType.ROOK: _continuous_moves,
    PieceType.QUEEN: _continuous_moves,
    PieceType.KING: _discrete_moves,
}


def get_all_moves(piece: Piece, board: Board) -> list[Position] | None:
    """Squares covered by *piece*; ``None`` (never ``[]``) when there are none."""
    moves = _ENUMERATORS[piece.piece_type](piece, board)
    return moves or None


def castling_destinations(king: Piece) -> list[Position]:
    """Candidate two-file king steps; legality is checked by the board."""
    source = king.position
    candidates = [Position(source.rank, source.file - 2), Position(source.rank, source.file + 2)]
    return [p for p in candidates if Position.within_bounds(p)]
