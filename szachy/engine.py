"""Game state, rules and move search for a chess game against the computer."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, Optional

from szachy.pieces import BOARD_SIZE, Board, Piece, PieceKind, Square

WHITE = 0
BLACK = 1
KING_INDEX = 4
OFF_BOARD: Square = (8, 8)
MATE_SCORE = 1_000_000
INFINITY = 9_999_999
ILLEGAL_MOVE_MESSAGE = "RUCH NIEPOPRAWNY: KRÓL W SZACHU."

_BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)

_FEN_VALUES = {
    "P": 100, "N": 350, "B": 351, "R": 500, "Q": 900, "K": 999,
    "p": -100, "n": -350, "b": -351, "r": -500, "q": -900, "k": -999,
}


def initial_pieces() -> list[list[Piece]]:
    """Return the white and black armies in their starting squares."""
    sides = []
    for sign, back_row, pawn_row in ((1, 7, 6), (-1, 0, 1)):
        back = [
            Piece(sign * int(kind), (col, back_row), col)
            for col, kind in enumerate(_BACK_RANK)
        ]
        pawns = [
            Piece(sign * int(PieceKind.PAWN), (col, pawn_row), BOARD_SIZE + col)
            for col in range(BOARD_SIZE)
        ]
        sides.append(back + pawns)
    return sides


def promote(piece: Piece) -> None:
    """Turn a pawn standing on its last row into a queen."""
    row = piece.position[1]
    if piece.figure == PieceKind.PAWN and row == 0:
        piece.figure = int(PieceKind.QUEEN)
        piece.promoted = True
    elif piece.figure == -PieceKind.PAWN and row == 7:
        piece.figure = -int(PieceKind.QUEEN)
        piece.promoted = True


def unpromote(piece: Piece) -> None:
    """Turn a queen standing on its promotion row back into a pawn."""
    row = piece.position[1]
    if piece.figure == PieceKind.QUEEN and row == 0:
        piece.figure = int(PieceKind.PAWN)
        piece.promoted = False
    elif piece.figure == -PieceKind.QUEEN and row == 7:
        piece.figure = -int(PieceKind.PAWN)
        piece.promoted = False


def _expand_fen_rows(fen: str) -> list[str]:
    placement = fen.split(" ", 1)[0]
    rows = [
        "".join("0" * int(char) if char in "0123456789" else char for char in part)
        for part in placement.split("/")
    ]
    if len(rows) < BOARD_SIZE or any(len(row) < BOARD_SIZE for row in rows[:BOARD_SIZE]):
        raise ValueError(f"malformed piece placement in FEN: {fen!r}")
    return rows[:BOARD_SIZE]


@dataclass
class Move:
    """A move of one piece, with whatever stood on the target square."""

    piece: Piece
    captured: Optional[Piece]
    start: Square
    end: Square
    promoted: bool = False
    value: int = 0


class Game:
    """Both armies, the board, whose turn it is and the search counters."""

    def __init__(self) -> None:
        self.pieces: list[list[Piece]] = initial_pieces()
        self.board = Board()
        self.white_turn = True
        self.selected: Optional[Piece] = None
        self.leaves = 0
        self.refresh_board()

    def _all_pieces(self) -> Iterator[Piece]:
        for side in self.pieces:
            yield from side

    def load_fen(self, fen: str) -> None:
        """Set up the position from the placement field of a FEN string.

        Placed pieces are marked as moved; pieces beyond an army's supply of a
        kind are left off the board, and unknown characters are treated as empty.
        """
        rows = _expand_fen_rows(fen)
        for piece in self._all_pieces():
            piece.position = OFF_BOARD
            piece.captured = True
            piece.has_moved = False
        self.board.clear()
        for y, row in enumerate(rows):
            for x, char in enumerate(row[:BOARD_SIZE]):
                value = _FEN_VALUES.get(char)
                if value is None:
                    continue
                piece = next(
                    (p for p in self._all_pieces() if p.figure == value and not p.has_moved),
                    None,
                )
                if piece is None:
                    continue
                piece.position = (x, y)
                piece.captured = False
                piece.has_moved = True
                self.board.place(piece)

    def refresh_board(self) -> None:
        self.board.refresh(self._all_pieces())

    def move_piece(self, piece: Piece, to: Square) -> None:
        piece.position = tuple(to)
        self.refresh_board()

    def evaluate(self) -> int:
        """Sum of the signed values of all pieces still in play."""
        return sum(p.figure for p in self._all_pieces() if not p.captured)

    def generate_all_moves(self, color: int) -> list[Move]:
        """Pseudo-legal moves of every uncaptured piece of the given side."""
        moves = []
        for piece in self.pieces[color]:
            if piece.captured:
                continue
            for target in piece.generate_moves(self.board):
                moves.append(Move(piece, self.board.piece_at(target), piece.position, target))
        return moves

    def is_square_attacked(self, square: Square, enemy_is_white: bool) -> bool:
        enemy = WHITE if enemy_is_white else BLACK
        square = tuple(square)
        return any(move.end == square for move in self.generate_all_moves(enemy))

    def _king_attacked(self, color: int) -> bool:
        king = self.pieces[color][KING_INDEX]
        return self.is_square_attacked(king.position, color == BLACK)

    def generate_legal_moves(self, color: int) -> list[Move]:
        """Moves of the given side that do not leave its king attacked."""
        legal = []
        for move in self.generate_all_moves(color):
            piece, captured = move.piece, move.captured
            origin = piece.position
            had_moved = piece.has_moved
            captured_had_moved = captured.has_moved if captured else False
            if captured:
                captured.captured = True
            piece.position = move.end
            piece.has_moved = True
            self.refresh_board()
            in_check = self._king_attacked(color)
            piece.position = origin
            piece.has_moved = had_moved
            if captured:
                captured.captured = False
                captured.has_moved = captured_had_moved
            self.refresh_board()
            if not in_check:
                legal.append(move)
        return legal

    def _play(self, move: Move) -> None:
        if move.captured:
            move.captured.captured = True
        self.move_piece(move.piece, move.end)

    def _unplay(self, move: Move) -> None:
        self.move_piece(move.piece, move.start)
        if move.captured:
            move.captured.captured = False
            self.board.place(move.captured)

    def negamax(self, color: int, alpha: int, beta: int, depth: int) -> int:
        """Alpha-beta search; leaves are scored by the material balance."""
        if depth == 0:
            self.leaves += 1
            return self.evaluate()
        moves = self.generate_legal_moves(color)
        if not moves:
            return -MATE_SCORE
        for move in moves:
            self._play(move)
            score = -self.negamax(1 - color, -beta, -alpha, depth - 1)
            self._unplay(move)
            if score >= beta:
                return beta
            if score > alpha:
                alpha = score
        return alpha

    def best_move(self, depth: int, rng: Optional[random.Random] = None) -> Move:
        """Pick one of black's best-scoring moves at random, without playing it."""
        if depth < 1:
            raise ValueError("search depth must be at least 1")
        rng = rng or random.Random()
        best_score = -INFINITY
        best: list[Move] = []
        for move in self.generate_legal_moves(BLACK):
            self._play(move)
            score = -self.negamax(WHITE, -INFINITY, INFINITY, depth - 1)
            self._unplay(move)
            if score > best_score:
                best_score = score
                best = [move]
            elif score == best_score:
                best.append(move)
        if not best:
            raise ValueError("black has no legal moves")
        return rng.choice(best)

    def apply_ai_move(self, move: Move) -> None:
        """Play a move chosen for black and hand the turn to white."""
        if move.captured:
            move.captured.captured = True
        self.move_piece(move.piece, move.end)
        move.piece.has_moved = True
        promote(move.piece)
        self.white_turn = True

    def is_checkmate(self, color: int) -> bool:
        if not self._king_attacked(color):
            return False
        return not self.generate_legal_moves(color)

    def is_stalemate(self, color: int) -> bool:
        if self._king_attacked(color):
            return False
        return not self.generate_legal_moves(color)

    def select(self, square: Square) -> Optional[Piece]:
        """Handle a click by white on a square; return the selected piece afterwards."""
        square = tuple(square)
        x, y = square
        if not self.white_turn or not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
            return self.selected
        if self.selected is not None:
            if square in self.selected.possible_moves:
                self.try_white_move(self.selected, square)
            else:
                self.selected = None
            return self.selected
        piece = self.board.piece_at(square)
        if piece is not None and piece.white:
            self.selected = piece
            legal = self.generate_legal_moves(WHITE)
            piece.possible_moves[:] = [m.end for m in legal if m.piece is piece]
        return self.selected

    def _castle(self, king: Piece, rook: Piece, step: int, king_col: int, rook_col: int) -> bool:
        x, y = king.position
        if any(self.is_square_attacked((x + step * i, y), False) for i in range(3)):
            return False
        self.move_piece(king, (king_col, y))
        self.move_piece(rook, (rook_col, y))
        king.has_moved = True
        rook.has_moved = True
        self.white_turn = False
        self.selected = None
        return True

    def try_white_move(self, piece: Piece, target: Square) -> bool:
        """Play a white move if it leaves the king safe; return whether it was played."""
        target = tuple(target)
        origin = piece.position
        target_piece = self.board.piece_at(target)
        castling = (
            piece.figure == PieceKind.KING
            and target_piece is not None
            and target_piece.figure == PieceKind.ROOK
            and target_piece.white == piece.white
        )
        if castling:
            if target_piece.position[0] == 7:
                return self._castle(piece, target_piece, 1, 6, 5)
            if target_piece.position[0] == 0:
                return self._castle(piece, target_piece, -1, 2, 3)
            return False

        if target_piece:
            target_piece.captured = True
        self.move_piece(piece, target)
        piece.has_moved = True
        if self._king_attacked(WHITE):
            print(ILLEGAL_MOVE_MESSAGE)
            piece.position = origin
            if target_piece:
                target_piece.captured = False
            self.refresh_board()
            self.selected = None
            return False
        promote(piece)
        self.white_turn = False
        self.selected = None
        return True

    def debug_dump(self) -> str:
        """Text grids of figures, occupancy and colours, row by row."""
        separator = "-" * 24
        squares = [
            [self.board.piece_at((x, y)) for x in range(BOARD_SIZE)] for y in range(BOARD_SIZE)
        ]
        lines = ["".join(f"{p.figure} " if p else "0   " for p in row) for row in squares]
        lines.append(separator)
        lines += ["".join("1 " if p else "0 " for p in row) for row in squares]
        lines.append(separator)
        lines += [
            "".join("1 " if p is not None and p.white else "0 " for p in row) for row in squares
        ]
        lines.append(separator)
        return "\n".join(lines) + "\n"