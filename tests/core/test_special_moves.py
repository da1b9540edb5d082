"""Tests for en passant, castling and promotion."""

import pytest

from chessrules.core.board import new_game
from chessrules.core.enums import Color, MoveRejection, PieceType
from chessrules.core.position import Position
from chessrules.exceptions import InvalidPromotionRequest

sq = Position.from_label


def _play(board, *moves: str) -> None:
    """Play "e2e4"-style moves, alternating colors from White."""
    color = Color.WHITE
    for text in moves:
        src, dst = sq(text[:2]), sq(text[2:])
        assert board.can_move_piece(src.file, src.rank, dst.file, dst.rank, color), text
        board.move_piece(src.file, src.rank, dst.file, dst.rank, color)
        color = color.opposite


class TestEnPassant:
    def test_white_captures(self, make_board) -> None:
        board = make_board("Pe5", "pd5", "Ke1", "ke8", last_move=("d7", "d5"))
        assert board.check_move(4, 3, 3, 2, Color.WHITE) is None
        outcome = board.move_piece(4, 3, 3, 2, Color.WHITE)
        assert outcome.en_passant
        assert outcome.captured == PieceType.PAWN
        assert board.get_piece_at(3, 3) is None
        assert board.get_piece_at(3, 2) is not None

    def test_black_captures(self, make_board) -> None:
        board = make_board("pd4", "Pe4", "Ke1", "ke8", last_move=("e2", "e4"))
        assert board.check_move(3, 4, 4, 5, Color.BLACK) is None
        board.move_piece(3, 4, 4, 5, Color.BLACK)
        assert board.get_piece_at(4, 4) is None
        captor = board.get_piece_at(4, 5)
        assert captor is not None and captor.color == Color.BLACK

    def test_needs_double_step(self, make_board) -> None:
        board = make_board("Pe5", "pd5", "Ke1", "ke8", last_move=("d6", "d5"))
        assert board.check_move(4, 3, 3, 2, Color.WHITE) == MoveRejection.UNREACHABLE

    def test_only_immediately_after(self) -> None:
        board = new_game()
        _play(board, "e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "h7h6")
        assert board.check_move(4, 3, 3, 2, Color.WHITE) == MoveRejection.UNREACHABLE

    def test_survives_undo(self) -> None:
        board = new_game()
        _play(board, "e2e4", "a7a6", "e4e5", "d7d5", "e5d6")
        assert board.get_piece_at(3, 3) is None
        assert board.undo_prev_move()
        assert board.get_prev_move() == (sq("d7"), sq("d5"))
        assert board.get_piece_at(3, 3) is not None
        assert board.can_move_piece(4, 3, 3, 2, Color.WHITE)


class TestCastling:
    def test_kingside(self, make_board) -> None:
        board = make_board("Ke1", "Rh1", "Ra1", "ke8")
        assert board.check_move(4, 7, 6, 7, Color.WHITE) is None
        outcome = board.move_piece(4, 7, 6, 7, Color.WHITE)
        assert outcome.castled
        rook = board.get_piece_at(5, 7)
        assert rook is not None and rook.piece_type == PieceType.ROOK and rook.has_moved
        assert board.get_piece_at(7, 7) is None

    def test_queenside(self, make_board) -> None:
        board = make_board("Ke1", "Rh1", "Ra1", "ke8")
        board.move_piece(4, 7, 2, 7, Color.WHITE)
        king = board.get_piece_at(2, 7)
        rook = board.get_piece_at(3, 7)
        assert king is not None and king.piece_type == PieceType.KING
        assert rook is not None and rook.piece_type == PieceType.ROOK
        assert board.get_piece_at(0, 7) is None

    def test_black_kingside(self, make_board) -> None:
        board = make_board("ke8", "rh8", "Ke1")
        assert board.check_move(4, 0, 6, 0, Color.BLACK) is None
        board.move_piece(4, 0, 6, 0, Color.BLACK)
        rook = board.get_piece_at(5, 0)
        assert rook is not None and rook.color == Color.BLACK

    @pytest.mark.parametrize(
        ("extra", "moved"),
        [
            ((), ("h1",)),  # rook has moved
            ((), ("e1",)),  # king has moved
            (("Ng1",), ()),  # square between occupied
            (("re5", "ka8"), ()),  # king in check
            (("rf5", "ka8"), ()),  # crossed square attacked
            (("rg5", "ka8"), ()),  # landing square attacked
        ],
    )
    def test_refused(self, make_board, extra: tuple[str, ...], moved: tuple[str, ...]) -> None:
        pieces = ("Ke1", "Rh1", *extra)
        if "ka8" not in extra:
            pieces += ("ke8",)
        board = make_board(*pieces, moved=moved)
        assert board.check_move(4, 7, 6, 7, Color.WHITE) == MoveRejection.UNREACHABLE

    def test_queenside_ignores_attack_on_b1(self, make_board) -> None:
        board = make_board("Ke1", "Ra1", "rb5", "ka8")
        assert board.under_threat(Color.WHITE, 7, 1)
        assert board.check_move(4, 7, 2, 7, Color.WHITE) is None

    def test_listed_in_legal_moves(self, make_board) -> None:
        board = make_board("Ke1", "Rh1", "ke8")
        assert (sq("e1"), sq("g1")) in board.legal_moves(Color.WHITE)


class TestPromotion:
    def test_needs_and_can_promote(self, make_board) -> None:
        board = make_board("Pa7", "Ke1", "kh5", moved=["a7"])
        assert board.needs_promotion(0, 1, 0, Color.WHITE)
        assert not board.needs_promotion(0, 1, 0, Color.BLACK)
        for choice in ("Q", "r", PieceType.BISHOP, PieceType.KNIGHT):
            assert board.can_promote(0, 1, 0, 0, Color.WHITE, choice)
        for bad in ("K", "x", None, PieceType.PAWN):
            assert not board.can_promote(0, 1, 0, 0, Color.WHITE, bad)

    def test_promote_replaces_pawn(self, make_board) -> None:
        board = make_board("Pa7", "Ke1", "kh5", moved=["a7"])
        promoted = board.promote(1, 0, Color.WHITE, "n")
        assert promoted.piece_type == PieceType.KNIGHT
        assert promoted.has_moved
        assert board.get_piece_at(0, 1) is promoted

    def test_invalid_promotions_raise_before_mutation(self, make_board) -> None:
        board = make_board("Pa7", "Ke1", "kh5", moved=["a7"])
        layout = board.layout()
        with pytest.raises(InvalidPromotionRequest):
            board.promote(1, 0, Color.WHITE, "K")
        with pytest.raises(InvalidPromotionRequest):
            board.promote(4, 4, Color.WHITE, "Q")
        with pytest.raises(InvalidPromotionRequest):
            board.promote(1, 0, Color.BLACK, "Q")
        assert board.layout() == layout

    @pytest.mark.parametrize(
        ("entries", "rank", "file", "color"),
        [
            (("Pe4", "Ke1", "kh8"), 4, 4, Color.WHITE),
            (("Pe2", "Ke1", "kh8"), 6, 4, Color.WHITE),
            (("pd5", "Ke1", "kh8"), 3, 3, Color.BLACK),
            (("pd7", "Ke1", "kh8"), 1, 3, Color.BLACK),
        ],
    )
    def test_pawn_far_from_last_rank_cannot_promote(
        self, make_board, entries: tuple[str, ...], rank: int, file: int, color: Color
    ) -> None:
        board = make_board(*entries)
        layout = board.layout()
        with pytest.raises(InvalidPromotionRequest):
            board.promote(rank, file, color, PieceType.QUEEN)
        assert board.layout() == layout
        pawn = board.get_piece_at(file, rank)
        assert pawn is not None and pawn.piece_type == PieceType.PAWN

    def test_pawn_on_last_rank_may_promote(self, make_board) -> None:
        board = make_board("Pb8", "Ke1", "kh5", moved=["b8"])
        assert board.promote(0, 1, Color.WHITE, "R").piece_type == PieceType.ROOK

    def test_black_promotes_on_first_rank(self, make_board) -> None:
        board = make_board("ph2", "Ka8", "ke8", moved=["h2"])
        assert board.needs_promotion(7, 6, 7, Color.BLACK)
        board.promote(6, 7, Color.BLACK, PieceType.QUEEN)
        board.move_piece(7, 6, 7, 7, Color.BLACK)
        queen = board.get_piece_at(7, 7)
        assert queen is not None and queen.piece_type == PieceType.QUEEN
