"""Board — the 8×8 grid, threat maps and move/legality orchestration.

The grid is the single source of truth for placement: the live-piece list is
derived from it on demand (row-major order), so the two can never disagree.
Threat maps are rebuilt from scratch after every committed or speculative
move.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from chessrules.config import CheckmateScope, RulesSettings
from chessrules.core import movement
from chessrules.core.cell import Cell, Grid, copy_grid, empty_grid, grid_pieces
from chessrules.core.enums import BoardStatus, Color, MoveRejection, PieceType
from chessrules.core.history import GameHistory, LastMove
from chessrules.core.piece import Piece, PieceState
from chessrules.core.position import BOARD_SIZE, Position
from chessrules.exceptions import HistoryBoundsExceeded, InvalidPromotionRequest

_LOGGER = logging.getLogger(__name__)

ThreatMap = list[list[bool]]

_BACK_RANK_LAYOUT: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _blank_map() -> ThreatMap:
    return [[False] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def _coerce_promotion(promotion: PieceType | str | None) -> PieceType | None:
    if promotion is None:
        return None
    if isinstance(promotion, PieceType):
        piece_type = promotion
    else:
        try:
            piece_type = PieceType.from_letter(promotion)
        except ValueError:
            return None
    return piece_type if piece_type in movement.PROMOTION_TYPES else None


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """What a committed move did.

    *piece_type* is the kind that left *src*; a promoted pawn reports PAWN
    here and its new kind in *promotion*.
    """

    src: Position
    dst: Position
    piece_type: PieceType
    color: Color
    captured: PieceType | None
    castled: bool
    en_passant: bool
    status: BoardStatus
    promotion: PieceType | None = None


class Board:
    """Mutable chess board with its own snapshot history."""

    __slots__ = (
        "settings",
        "history",
        "turn",
        "_rng",
        "_cells",
        "_threats",
        "_in_check",
        "_in_checkmate",
        "_last_move",
    )

    def __init__(
        self,
        settings: RulesSettings | None = None,
        rng: random.Random | None = None,
        *,
        standard_layout: bool = True,
    ) -> None:
        self.settings = settings if settings is not None else RulesSettings()
        self._rng = rng if rng is not None else random.Random(self.settings.seed)
        self._cells: Grid = empty_grid()
        self._threats: dict[Color, ThreatMap] = {c: _blank_map() for c in Color}
        self._in_check: dict[Color, bool] = {c: False for c in Color}
        self._in_checkmate: dict[Color, bool] = {c: False for c in Color}
        self._last_move: LastMove | None = None
        self.history = GameHistory()
        self.turn = 0

        if standard_layout:
            for file, piece_type in enumerate(_BACK_RANK_LAYOUT):
                self._put(Piece(piece_type, Color.BLACK, Position(0, file)))
                self._put(Piece(piece_type, Color.WHITE, Position(7, file)))
            for file in range(BOARD_SIZE):
                self._put(Piece(PieceType.PAWN, Color.BLACK, Position(1, file)))
                self._put(Piece(PieceType.PAWN, Color.WHITE, Position(6, file)))
        self._start_history()

    # -- Factories ----------------------------------------------------------

    @classmethod
    def from_pieces(
        cls,
        pieces: Iterable[Piece],
        settings: RulesSettings | None = None,
        rng: random.Random | None = None,
        last_move: LastMove | None = None,
    ) -> Board:
        """Board holding exactly *pieces*, with its own start snapshot.

        Raises:
            ValueError: two pieces share a square, or a piece is off-board.
        """
        board = cls(settings, rng, standard_layout=False)
        for piece in pieces:
            if not Position.within_bounds(piece.position):
                raise ValueError(f"Piece off the board: {piece.position}")
            if board.get_piece_at(piece.position.file, piece.position.rank) is not None:
                raise ValueError(f"Square {piece.position} is occupied twice")
            board._put(piece)
        board._last_move = last_move
        board.history = GameHistory()
        board._start_history()
        return board

    def _put(self, piece: Piece) -> None:
        self._cells[piece.position.rank][piece.position.file].piece = piece

    def _start_history(self) -> None:
        self.find_threats()
        self._update_status()
        self.history.add_state(
            self._cells, 0, self.settings.start_title, last_move=self._last_move
        )
        self.turn = 1

    # -- Element access -----------------------------------------------------

    @property
    def cells(self) -> Grid:
        return self._cells

    @property
    def pieces(self) -> list[Piece]:
        """Live pieces in row-major order."""
        return grid_pieces(self._cells)

    def pieces_of(self, color: Color) -> list[Piece]:
        return [p for p in self.pieces if p.color == color]

    def get_piece_at(self, file: int, rank: int) -> Piece | None:
        return self._cells[rank][file].piece

    def get_prev_move(self) -> LastMove | None:
        return self._last_move

    def flatten(self) -> list[Cell]:
        """All 64 cells, rank 0..7 and file 0..7 within each rank."""
        return [cell for row in self._cells for cell in row]

    def layout(self) -> tuple[tuple[PieceState | None, ...], ...]:
        return tuple(
            tuple(cell.piece.state if cell.piece else None for cell in row)
            for row in self._cells
        )

    def set_board(
        self,
        cells: Sequence[Sequence[Cell]],
        pieces: Sequence[Piece] | None = None,
        last_move: LastMove | None = None,
    ) -> None:
        """Replace the grid with a deep copy of *cells* and recompute threats.

        *pieces* is the redundant flat list carried by snapshots; when given
        it must describe the same pieces as the grid.
        """
        grid = copy_grid(cells)
        if pieces is not None:
            expected = sorted((p.position.rank, p.position.file, p.state) for p in pieces)
            actual = sorted(
                (p.position.rank, p.position.file, p.state) for p in grid_pieces(grid)
            )
            if expected != actual:
                raise ValueError("Piece list does not match the board")
        self._cells = grid
        self._last_move = last_move
        self.find_threats()
        self._update_status()

    # -- Threats and check --------------------------------------------------

    def find_threats(self) -> None:
        """Rebuild both threat maps from every live piece's move list."""
        threats = {c: _blank_map() for c in Color}
        for piece in self.pieces:
            moves = piece.get_all_moves(self)
            if moves is None:
                continue
            grid = threats[piece.color]
            for square in moves:
                grid[square.rank][square.file] = True
        self._threats = threats

    def threat_map(self, color: Color) -> tuple[tuple[bool, ...], ...]:
        """Squares threatened *by* *color* (read-only copy)."""
        return tuple(tuple(row) for row in self._threats[color])

    def under_threat(self, color: Color, rank: int, file: int) -> bool:
        """Is the square threatened by the opponent of *color*?"""
        return self._threats[color.opposite][rank][file]

    def _king(self, color: Color) -> Piece | None:
        for piece in self.pieces:
            if piece.piece_type == PieceType.KING and piece.color == color:
                return piece
        return None

    def _king_attacked(self, color: Color) -> bool:
        king = self._king(color)
        if king is None:
            return False
        return self.under_threat(color, king.position.rank, king.position.file)

    def is_king_in_check(self, color: Color) -> bool:
        """Is *color*'s king on a threatened square? Updates the check flag."""
        in_check = self._king_attacked(color)
        self._in_check[color] = in_check
        return in_check

    def is_king_in_checkmate(self, color: Color) -> bool:
        """In check with no way out. Updates the checkmate flag."""
        if not self.is_king_in_check(color):
            self._in_checkmate[color] = False
            return False
        if self.settings.checkmate_scope == CheckmateScope.KING_ONLY:
            mated = not self._king_can_step_out(color)
        else:
            mated = not self.has_legal_move(color)
        self._in_checkmate[color] = mated
        return mated

    def _king_can_step_out(self, color: Color) -> bool:
        king = self._king(color)
        if king is None:
            return False
        for square in king.get_all_moves(self) or ():
            if self.under_threat(color, square.rank, square.file):
                continue
            occupant = self.get_piece_at(square.file, square.rank)
            if occupant is None or occupant.color != color:
                return True
        return False

    def _update_status(self) -> BoardStatus:
        before = self.check_game_progress()
        for color in Color:
            self.is_king_in_checkmate(color)
        status = self.check_game_progress()
        if status != before and status != BoardStatus.NO_CHECKS:
            _LOGGER.info("Board status: %s", status.name)
        return status

    def check_game_progress(self) -> BoardStatus:
        """Checkmate is reported before check, White before Black."""
        if self._in_checkmate[Color.WHITE]:
            return BoardStatus.WHITE_IN_CHECKMATE
        if self._in_checkmate[Color.BLACK]:
            return BoardStatus.BLACK_IN_CHECKMATE
        if self._in_check[Color.WHITE]:
            return BoardStatus.WHITE_IN_CHECK
        if self._in_check[Color.BLACK]:
            return BoardStatus.BLACK_IN_CHECK
        return BoardStatus.NO_CHECKS

    # -- Legality -----------------------------------------------------------

    def check_move(
        self,
        src_file: int,
        src_rank: int,
        dest_file: int,
        dest_rank: int,
        color: Color,
    ) -> MoveRejection | None:
        """First rule the move breaks, or ``None`` if it is legal."""
        src = Position(src_rank, src_file)
        dest = Position(dest_rank, dest_file)
        rejection = self._first_rejection(src, dest, color)
        if rejection is not None:
            _LOGGER.debug("Illegal move %s-%s for %s: %s", src, dest, color, rejection.name)
        return rejection

    def _first_rejection(
        self, src: Position, dest: Position, color: Color
    ) -> MoveRejection | None:
        if not (Position.within_bounds(src) and Position.within_bounds(dest)):
            return MoveRejection.OUT_OF_BOUNDS
        piece = self.get_piece_at(src.file, src.rank)
        if piece is None:
            return MoveRejection.NO_PIECE
        if piece.color != color:
            return MoveRejection.WRONG_COLOR
        if src == dest:
            return MoveRejection.SAME_SQUARE
        if not piece.can_reach_destination(self, dest):
            return MoveRejection.UNREACHABLE
        if self.can_threaten_king(src.rank, src.file, dest.rank, dest.file):
            return MoveRejection.SELF_CHECK
        return None

    def can_move_piece(
        self,
        src_file: int,
        src_rank: int,
        dest_file: int,
        dest_rank: int,
        color: Color,
    ) -> bool:
        return self.check_move(src_file, src_rank, dest_file, dest_rank, color) is None

    def can_threaten_king(
        self, src_rank: int, src_file: int, dest_rank: int, dest_file: int
    ) -> bool:
        """Would this move leave the mover's own king attacked?

        The move is applied provisionally, threats are recomputed, and the
        board is put back exactly as it was before returning.
        """
        src_cell = self._cells[src_rank][src_file]
        dest_cell = self._cells[dest_rank][dest_file]
        mover = src_cell.piece
        if mover is None:
            return False
        color = mover.color
        dest = Position(dest_rank, dest_file)

        if mover.piece_type == PieceType.KING and self.under_threat(
            color, dest_rank, dest_file
        ):
            return True

        passed_cell: Cell | None = None
        if movement.is_en_passant(self, mover, dest):
            passed_cell = self._cells[src_rank][dest_file]
        passed_piece = passed_cell.piece if passed_cell is not None else None

        captured = dest_cell.piece
        origin = mover.position
        saved_threats = self._threats

        dest_cell.piece = mover
        src_cell.piece = None
        mover.position = dest
        if passed_cell is not None:
            passed_cell.piece = None
        try:
            self.find_threats()
            result = self._king_attacked(color)
        finally:
            if passed_cell is not None:
                passed_cell.piece = passed_piece
            mover.position = origin
            src_cell.piece = mover
            dest_cell.piece = captured
            self._threats = saved_threats
        return result

    def _candidate_destinations(self, piece: Piece) -> list[Position]:
        candidates = list(piece.get_all_moves(self) or ())
        if piece.piece_type == PieceType.KING:
            candidates.extend(movement.castling_destinations(piece))
        return candidates

    def legal_moves(self, color: Color) -> list[LastMove]:
        """Every ``(src, dst)`` pair that passes :meth:`can_move_piece`."""
        moves: list[LastMove] = []
        for piece in self.pieces_of(color):
            src = piece.position
            for dest in self._candidate_destinations(piece):
                if self._first_rejection(src, dest, color) is None:
                    moves.append((src, dest))
        return moves

    def has_legal_move(self, color: Color) -> bool:
        for piece in self.pieces_of(color):
            src = piece.position
            for dest in self._candidate_destinations(piece):
                if self._first_rejection(src, dest, color) is None:
                    return True
        return False

    # -- Mutation -----------------------------------------------------------

    def move_piece(
        self,
        src_file: int,
        src_rank: int,
        dest_file: int,
        dest_rank: int,
        color: Color,
    ) -> MoveOutcome:
        """Commit a move already validated by :meth:`can_move_piece`."""
        src = Position(src_rank, src_file)
        dest = Position(dest_rank, dest_file)
        src_cell = self._cells[src_rank][src_file]
        mover = src_cell.piece
        if mover is None:
            raise ValueError(f"No piece on {src}")

        captured: Piece | None = None
        en_passant = False
        castled = False

        if mover.piece_type == PieceType.PAWN and movement.is_en_passant(self, mover, dest):
            passed_cell = self._cells[src_rank][dest_file]
            captured = passed_cell.piece
            passed_cell.piece = None
            en_passant = True
        elif mover.piece_type == PieceType.KING and movement.is_castling_move(
            self, mover, dest
        ):
            rook_from, rook_to = movement.castling_rook_files(src_file, dest_file)
            rook_cell = self._cells[src_rank][rook_from]
            rook = rook_cell.piece
            assert rook is not None
            rook_cell.piece = None
            self._cells[src_rank][rook_to].piece = rook
            rook.position = Position(src_rank, rook_to)
            rook.has_moved = True
            castled = True

        dest_cell = self._cells[dest_rank][dest_file]
        if dest_cell.piece is not None:
            captured = dest_cell.piece
        src_cell.piece = None
        dest_cell.piece = mover
        mover.position = dest
        mover.has_moved = True
        self._last_move = (src, dest)

        self.find_threats()
        status = self._update_status()

        self.history.add_state(
            self._cells, self.turn, self._title_after(color, status), self._last_move
        )
        self.turn += 1

        _LOGGER.debug("%s %s %s-%s (%s)", color, mover.piece_type.name, src, dest, status.name)
        return MoveOutcome(
            src=src,
            dst=dest,
            piece_type=mover.piece_type,
            color=color,
            captured=captured.piece_type if captured is not None else None,
            castled=castled,
            en_passant=en_passant,
            status=status,
        )

    @staticmethod
    def _title_after(color: Color, status: BoardStatus) -> str:
        if status == BoardStatus.WHITE_IN_CHECKMATE:
            return "Checkmate! Black wins"
        if status == BoardStatus.BLACK_IN_CHECKMATE:
            return "Checkmate! White wins"
        return f"{color.opposite}'s turn"

    def make_random_move(
        self, color: Color, promotion: PieceType = PieceType.QUEEN
    ) -> MoveOutcome:
        """Play a uniformly random legal move for *color*.

        Rejection sampling: pick a random piece, then a random square from its
        move list (castling squares included for the king), until
        :meth:`can_move_piece` accepts. The caller must make sure *color* has
        a legal move. Pawns reaching the last rank become *promotion*.
        """
        candidates = self.pieces_of(color)
        if not candidates:
            raise ValueError(f"{color} has no pieces on the board")
        while True:
            piece = self._rng.choice(candidates)
            moves = self._candidate_destinations(piece)
            if not moves:
                continue
            dest = self._rng.choice(moves)
            src = piece.position
            if not self.can_move_piece(src.file, src.rank, dest.file, dest.rank, color):
                continue
            if not self.can_promote(src.file, src.rank, dest.file, dest.rank, color, promotion):
                return self.move_piece(src.file, src.rank, dest.file, dest.rank, color)
            promoted = self.promote(src.rank, src.file, color, promotion)
            outcome = self.move_piece(src.file, src.rank, dest.file, dest.rank, color)
            return replace(
                outcome, piece_type=PieceType.PAWN, promotion=promoted.piece_type
            )

    # -- Promotion ----------------------------------------------------------

    def needs_promotion(
        self, src_file: int, src_rank: int, dest_rank: int, color: Color
    ) -> bool:
        piece = self.get_piece_at(src_file, src_rank)
        return (
            piece is not None
            and piece.piece_type == PieceType.PAWN
            and piece.color == color
            and dest_rank == movement.PROMOTION_RANK[color]
        )

    def can_promote(
        self,
        src_file: int,
        src_rank: int,
        dest_file: int,
        dest_rank: int,
        color: Color,
        promotion: PieceType | str | None,
    ) -> bool:
        """Pawn of *color*, landing on its last rank, promoting to Q/R/B/N."""
        return self.needs_promotion(src_file, src_rank, dest_rank, color) and (
            _coerce_promotion(promotion) is not None
        )

    def promote(
        self, rank: int, file: int, color: Color, promotion: PieceType | str
    ) -> Piece:
        """Replace the pawn on (rank, file) with a new piece of the same color.

        The pawn may stand on the rank before its promotion rank (promotion
        ahead of the move) or on the promotion rank itself.

        Raises:
            InvalidPromotionRequest: no pawn of *color* there, the pawn is on
                the wrong rank, or the target type is not a queen, rook,
                bishop or knight.
        """
        piece_type = _coerce_promotion(promotion)
        if piece_type is None:
            raise InvalidPromotionRequest(f"Cannot promote to {promotion!r}")
        cell = self._cells[rank][file]
        pawn = cell.piece
        if pawn is None or pawn.piece_type != PieceType.PAWN or pawn.color != color:
            raise InvalidPromotionRequest(f"No {color} pawn on {cell.position}")
        last_rank = movement.PROMOTION_RANK[color]
        if rank not in (last_rank, last_rank - movement.PAWN_FORWARD[color]):
            raise InvalidPromotionRequest(
                f"{color} pawn on {cell.position} is not about to promote"
            )
        promoted = Piece(piece_type, color, cell.position, pawn.has_moved)
        cell.piece = promoted
        self.find_threats()
        _LOGGER.debug("%s pawn on %s promoted to %s", color, cell.position, piece_type.name)
        return promoted

    # -- History ------------------------------------------------------------

    def add_no_move_state(self, title: str) -> None:
        """Record a resign/draw event: a snapshot with no board change."""
        self.history.add_state(self._cells, self.turn, title, self._last_move)
        self.turn += 1

    def undo_prev_move(self) -> bool:
        """Restore the previous snapshot; False when nothing can be undone."""
        try:
            snapshot = self.history.undo()
        except HistoryBoundsExceeded:
            _LOGGER.debug("Nothing to undo")
            return False
        snapshot.restore(self)
        self.turn = snapshot.turn + 1
        return True

    # -- Display ------------------------------------------------------------

    def render(self) -> str:
        rows: list[str] = []
        for rank, row in enumerate(self._cells):
            line = " ".join(str(c.piece) if c.piece else "." for c in row)
            rows.append(f"{BOARD_SIZE - rank} {line}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

    def threats_to_string(self) -> str:
        parts: list[str] = []
        for color in Color:
            parts.append(f"Cells threatened by {color}:")
            for row in self._threats[color]:
                parts.append(" ".join("T" if hit else "f" for hit in row))
        return "\n".join(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.layout() == other.layout()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return self.render()


def new_game(settings: RulesSettings | None = None) -> Board:
    """Standard starting position with its "Game start!" snapshot."""
    return Board(settings)
