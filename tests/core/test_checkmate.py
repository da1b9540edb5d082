"""Tests for check and checkmate detection under both checkmate scopes."""

from chessrules.config import CheckmateScope, RulesSettings
from chessrules.core.board import new_game
from chessrules.core.enums import BoardStatus, Color
from chessrules.core.position import Position

sq = Position.from_label

KING_ONLY = RulesSettings(checkmate_scope=CheckmateScope.KING_ONLY)


class TestSmotheredCorner:
    def test_mate_in_both_scopes(self, make_board) -> None:
        for settings in (None, KING_ONLY):
            board = make_board("Kh1", "qg2", "kf3", settings=settings)
            assert board.check_game_progress() == BoardStatus.WHITE_IN_CHECKMATE
            assert board.is_king_in_checkmate(Color.WHITE)
            assert not board.is_king_in_checkmate(Color.BLACK)

    def test_capture_escape_only_counts_for_all_pieces(self, make_board) -> None:
        board = make_board("Kh1", "Ra2", "qg2", "kf3")
        assert board.check_game_progress() == BoardStatus.WHITE_IN_CHECK
        assert board.legal_moves(Color.WHITE) == [(sq("a2"), sq("g2"))]

        historical = make_board("Kh1", "Ra2", "qg2", "kf3", settings=KING_ONLY)
        assert historical.check_game_progress() == BoardStatus.WHITE_IN_CHECKMATE

    def test_defended_attacker_cannot_be_taken_by_king(self, make_board) -> None:
        board = make_board("Kh1", "qg2", "kf3")
        assert board.under_threat(Color.WHITE, 6, 6)  # g2 is defended


class TestPlayedMates:
    def test_fools_mate(self) -> None:
        board = new_game()
        moves = [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")]
        color = Color.WHITE
        outcome = None
        for a, b in moves:
            src, dst = sq(a), sq(b)
            assert board.can_move_piece(src.file, src.rank, dst.file, dst.rank, color)
            outcome = board.move_piece(src.file, src.rank, dst.file, dst.rank, color)
            color = color.opposite
        assert outcome is not None
        assert outcome.status == BoardStatus.WHITE_IN_CHECKMATE
        assert board.history.latest.title == "Checkmate! Black wins"
        assert len(board.history) == 5
        assert not board.has_legal_move(Color.WHITE)

    def test_back_rank_mate_title(self, make_board) -> None:
        board = make_board("Kg1", "Ra1", "kg8", "pf7", "pg7", "ph7")
        outcome = board.move_piece(0, 7, 0, 0, Color.WHITE)
        assert outcome.status == BoardStatus.BLACK_IN_CHECKMATE
        assert board.history.latest.title == "Checkmate! White wins"


class TestNotCheckmate:
    def test_check_with_escape(self, make_board) -> None:
        board = make_board("Ke1", "re8", "ka8")
        assert board.check_game_progress() == BoardStatus.WHITE_IN_CHECK
        assert not board.is_king_in_checkmate(Color.WHITE)

    def test_stalemate_is_not_reported(self, make_board) -> None:
        board = make_board("Ka1", "qb3", "kh8")
        assert board.check_game_progress() == BoardStatus.NO_CHECKS
        assert not board.has_legal_move(Color.WHITE)

    def test_status_order_prefers_white(self, make_board) -> None:
        # Both kings attacked at once; White is reported first.
        board = make_board("Ke1", "Re7", "re2", "ke8")
        assert board.is_king_in_check(Color.WHITE)
        assert board.is_king_in_check(Color.BLACK)
        assert board.check_game_progress() == BoardStatus.WHITE_IN_CHECK
