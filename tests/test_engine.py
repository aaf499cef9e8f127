import random

import pytest

from szachy.engine import (
    ILLEGAL_MOVE_MESSAGE,
    MATE_SCORE,
    Game,
    Move,
    initial_pieces,
    promote,
    unpromote,
)
from szachy.pieces import Piece, PieceKind

MATE_FEN = "R5k1/5ppp/8/8/8/8/8/6K1 b - - 0 1"
STALEMATE_FEN = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
HANGING_QUEEN_FEN = "k7/8/8/8/8/8/8/r2Q3K b - - 0 1"


def _snapshot(game):
    return [(p.position, p.captured, p.figure) for side in game.pieces for p in side]


def _fresh(fen):
    game = Game()
    game.load_fen(fen)
    for side in game.pieces:
        for piece in side:
            piece.has_moved = False
    return game


def test_initial_pieces_layout():
    white, black = initial_pieces()
    assert len(white) == len(black) == 16
    assert white[4].figure == PieceKind.KING and white[4].position == (4, 7)
    assert black[4].figure == -PieceKind.KING and black[4].position == (4, 0)
    assert all(p.figure == PieceKind.PAWN for p in white[8:])
    assert all(p.position[1] == 1 for p in black[8:])
    assert [p.index for p in white] == list(range(16))


def test_initial_material_balanced():
    assert Game().evaluate() == 0


def test_initial_legal_move_count():
    game = Game()
    assert len(game.generate_legal_moves(0)) == 20
    assert len(game.generate_legal_moves(1)) == len(game.generate_legal_moves(0))


def test_promote_and_unpromote_round_trip():
    white = Piece(int(PieceKind.PAWN), (3, 0))
    promote(white)
    assert white.figure == PieceKind.QUEEN and white.promoted
    unpromote(white)
    assert white.figure == PieceKind.PAWN and not white.promoted

    black = Piece(-int(PieceKind.PAWN), (3, 7))
    promote(black)
    assert black.figure == -PieceKind.QUEEN and black.promoted


def test_promote_ignores_pawn_off_last_row():
    pawn = Piece(int(PieceKind.PAWN), (3, 3))
    promote(pawn)
    assert pawn.figure == PieceKind.PAWN and not pawn.promoted
    queen = Piece(int(PieceKind.QUEEN), (3, 3))
    unpromote(queen)
    assert queen.figure == PieceKind.QUEEN


def test_load_fen_places_pieces_and_drops_extras():
    game = Game()
    game.load_fen("r3r2k/8/8/4r3/8/8/8/R3K2R w KQkq - 0 1")
    assert game.board.piece_at((0, 0)).figure == -PieceKind.ROOK
    assert game.board.piece_at((7, 0)).figure == -PieceKind.KING
    assert game.board.piece_at((4, 7)) is game.pieces[0][4]
    # Black has only two rooks, so the third one in the placement is dropped.
    assert game.board.piece_at((4, 3)) is None
    placed = [p for side in game.pieces for p in side if not p.captured]
    assert all(p.has_moved for p in placed)
    assert all(p.position == (8, 8) for side in game.pieces for p in side if p.captured)


def test_load_fen_rejects_short_placement():
    with pytest.raises(ValueError):
        Game().load_fen("8/8/8 w - - 0 1")


def test_move_piece_updates_board():
    game = Game()
    pawn = game.pieces[0][12]
    game.move_piece(pawn, (4, 4))
    assert game.board.piece_at((4, 4)) is pawn
    assert not game.board.is_occupied((4, 6))


def test_refresh_board_drops_captured():
    game = Game()
    rook = game.pieces[1][0]
    rook.captured = True
    game.refresh_board()
    assert game.board.piece_at((0, 0)) is None
    assert game.evaluate() == int(PieceKind.ROOK)


def test_square_attacked_in_start_position():
    game = Game()
    assert game.is_square_attacked((4, 4), True)
    assert not game.is_square_attacked((0, 3), True)


def test_generate_all_moves_records_capture():
    game = Game()
    game.load_fen(HANGING_QUEEN_FEN)
    queen = game.board.piece_at((3, 7))
    captures = [m for m in game.generate_all_moves(1) if m.captured is not None]
    assert [(m.piece.figure, m.end, m.captured) for m in captures] == [
        (-PieceKind.ROOK, (3, 7), queen)
    ]


def test_generate_legal_moves_restores_state():
    game = Game()
    game.load_fen(HANGING_QUEEN_FEN)
    before = _snapshot(game)
    moves = game.generate_legal_moves(1)
    assert moves
    assert _snapshot(game) == before
    assert all(m.piece.position == m.start for m in moves)


def test_checkmate_detected():
    game = Game()
    game.load_fen(MATE_FEN)
    assert game.is_checkmate(1)
    assert not game.is_stalemate(1)
    assert not game.is_checkmate(0)


def test_stalemate_detected():
    game = Game()
    game.load_fen(STALEMATE_FEN)
    assert game.is_stalemate(1)
    assert not game.is_checkmate(1)


def test_negamax_depth_zero_counts_leaf():
    game = Game()
    game.load_fen(HANGING_QUEEN_FEN)
    assert game.negamax(0, -10, 10, 0) == game.evaluate()
    assert game.leaves == 1


def test_negamax_mated_side_scores_mate():
    game = Game()
    game.load_fen(MATE_FEN)
    assert game.negamax(1, -MATE_SCORE * 2, MATE_SCORE * 2, 2) == -MATE_SCORE


def test_best_move_captures_queen_and_restores():
    game = Game()
    game.load_fen(HANGING_QUEEN_FEN)
    queen = game.board.piece_at((3, 7))
    before = _snapshot(game)
    legal = game.generate_legal_moves(1)
    game.leaves = 0
    move = game.best_move(1, random.Random(0))
    assert isinstance(move, Move)
    assert move.piece.figure == -PieceKind.ROOK
    assert move.end == (3, 7) and move.captured is queen
    assert game.leaves == len(legal)
    assert _snapshot(game) == before


def test_apply_ai_move_plays_capture():
    game = Game()
    game.load_fen(HANGING_QUEEN_FEN)
    game.white_turn = False
    move = game.best_move(1, random.Random(1))
    game.apply_ai_move(move)
    assert move.captured.captured
    assert game.board.piece_at((3, 7)) is move.piece
    assert game.white_turn
    assert game.evaluate() == -int(PieceKind.ROOK)


def test_apply_ai_move_promotes_pawn():
    game = Game()
    game.load_fen("k7/8/8/8/8/8/p7/7K b - - 0 1")
    pawn = game.board.piece_at((0, 6))
    move = next(m for m in game.generate_legal_moves(1) if m.piece is pawn)
    game.apply_ai_move(move)
    assert pawn.position == (0, 7)
    assert pawn.figure == -PieceKind.QUEEN and pawn.promoted


def test_best_move_errors():
    game = Game()
    with pytest.raises(ValueError):
        game.best_move(0)
    game.load_fen(STALEMATE_FEN)
    with pytest.raises(ValueError):
        game.best_move(1, random.Random(0))


def test_select_and_move_pawn():
    game = Game()
    pawn = game.select((4, 6))
    assert pawn is game.pieces[0][12]
    assert sorted(pawn.possible_moves) == [(4, 4), (4, 5)]
    assert game.select((4, 4)) is None
    assert pawn.position == (4, 4) and pawn.has_moved
    assert not game.white_turn


def test_select_ignores_black_and_off_board():
    game = Game()
    assert game.select((4, 1)) is None
    assert game.select((9, 9)) is None
    knight = game.select((6, 7))
    assert sorted(knight.possible_moves) == [(5, 5), (7, 5)]
    assert game.select((0, 0)) is None
    assert game.white_turn


def test_pinned_move_rejected(capsys):
    game = Game()
    game.load_fen("4r2k/8/8/8/8/8/4R3/4K3 w - - 0 1")
    rook = game.board.piece_at((4, 6))
    assert not game.try_white_move(rook, (0, 6))
    assert rook.position == (4, 6)
    assert game.board.piece_at((4, 6)) is rook
    assert game.white_turn
    assert ILLEGAL_MOVE_MESSAGE in capsys.readouterr().out


def test_kingside_castling():
    game = _fresh("7k/8/8/8/8/8/8/R3K2R w - - 0 1")
    king = game.pieces[0][4]
    assert (7, 7) in king.generate_moves(game.board)
    assert game.try_white_move(king, (7, 7))
    assert king.position == (6, 7)
    assert game.board.piece_at((5, 7)).figure == PieceKind.ROOK
    assert not game.white_turn


def test_queenside_castling():
    game = _fresh("7k/8/8/8/8/8/8/R3K2R w - - 0 1")
    king = game.pieces[0][4]
    assert game.try_white_move(king, (0, 7))
    assert king.position == (2, 7)
    assert game.board.piece_at((3, 7)).figure == PieceKind.ROOK


def test_castling_through_attack_refused():
    game = _fresh("5r1k/8/8/8/8/8/8/R3K2R w - - 0 1")
    king = game.pieces[0][4]
    assert not game.try_white_move(king, (7, 7))
    assert king.position == (4, 7)
    assert game.white_turn


def test_debug_dump_start_position():
    lines = Game().debug_dump().splitlines()
    assert lines[0] == "-500 -350 -351 -900 -999 -351 -350 -500 "
    assert lines[2] == "0   " * 8
    assert lines.count("-" * 24) == 3
    assert lines[9] == "1 " * 8
    assert lines[11] == "0 " * 8
    assert lines[18] == "0 " * 8
    assert lines[25] == "1 " * 8