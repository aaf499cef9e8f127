"""Chess pieces, their pseudo-legal move generation and the board they stand on."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator, Optional

BOARD_SIZE = 8

Square = tuple[int, int]


class PieceKind(IntEnum):
    """Material value of each kind of piece; black pieces carry the negated value."""

    PAWN = 100
    KNIGHT = 350
    BISHOP = 351
    ROOK = 500
    QUEEN = 900
    KING = 999


_KNIGHT_OFFSETS = ((2, 1), (2, -1), (-2, 1), (-2, -1), (1, 2), (1, -2), (-1, 2), (-1, -2))
_KING_OFFSETS = ((1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1))
_ROOK_DIRECTIONS = ((0, -1), (0, 1), (1, 0), (-1, 0))
_BISHOP_DIRECTIONS = ((1, 1), (-1, -1), (1, -1), (-1, 1))


def _on_board(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


@dataclass(eq=False)
class Piece:
    """A piece identified by its signed figure value; positions are (column, row)."""

    figure: int
    position: Square = (0, 0)
    index: int = 0
    has_moved: bool = False
    captured: bool = False
    promoted: bool = False
    possible_moves: list[Square] = field(default_factory=list)

    @property
    def white(self) -> bool:
        return self.figure > 0

    @property
    def kind(self) -> PieceKind:
        return PieceKind(abs(self.figure))

    def is_king(self) -> bool:
        return abs(self.figure) == PieceKind.KING

    def generate_moves(self, board: Board) -> list[Square]:
        """Recompute and return the pseudo-legal target squares of this piece."""
        self.possible_moves.clear()
        generator = self._GENERATORS.get(abs(self.figure))
        if generator is not None:
            self.possible_moves.extend(generator(self, board))
        return self.possible_moves

    def _is_enemy(self, other: Optional[Piece]) -> bool:
        return other is not None and other.white != self.white

    def _pawn_moves(self, board: Board) -> Iterator[Square]:
        x, y = self.position
        step = -1 if self.white else 1
        start_row = 6 if self.white else 1
        ahead = y + step
        if _on_board(x, ahead) and not board.is_occupied((x, ahead)):
            yield (x, ahead)
        if (
            y == start_row
            and not board.is_occupied((x, y + step))
            and not board.is_occupied((x, y + 2 * step))
        ):
            yield (x, y + 2 * step)
        for dx in (-1, 1):
            tx = x + dx
            if _on_board(tx, ahead) and self._is_enemy(board.piece_at((tx, ahead))):
                yield (tx, ahead)

    def _slide(self, board: Board, directions) -> Iterator[Square]:
        x, y = self.position
        for dx, dy in directions:
            tx, ty = x + dx, y + dy
            while _on_board(tx, ty):
                target = board.piece_at((tx, ty))
                if target is not None:
                    if target.white != self.white:
                        yield (tx, ty)
                    break
                yield (tx, ty)
                tx, ty = tx + dx, ty + dy

    def _jumps(self, board: Board, offsets) -> Iterator[Square]:
        x, y = self.position
        for dx, dy in offsets:
            tx, ty = x + dx, y + dy
            if _on_board(tx, ty):
                target = board.piece_at((tx, ty))
                if target is None or target.white != self.white:
                    yield (tx, ty)

    def _rook_moves(self, board: Board) -> Iterator[Square]:
        return self._slide(board, _ROOK_DIRECTIONS)

    def _bishop_moves(self, board: Board) -> Iterator[Square]:
        return self._slide(board, _BISHOP_DIRECTIONS)

    def _queen_moves(self, board: Board) -> Iterator[Square]:
        yield from self._slide(board, _ROOK_DIRECTIONS)
        yield from self._slide(board, _BISHOP_DIRECTIONS)

    def _knight_moves(self, board: Board) -> Iterator[Square]:
        return self._jumps(board, _KNIGHT_OFFSETS)

    def _king_moves(self, board: Board) -> Iterator[Square]:
        yield from self._jumps(board, _KING_OFFSETS)
        if self.has_moved:
            return
        row = 7 if self.white else 0
        # Castling is offered as a move onto the rook's own square.
        if not board.is_occupied((5, row)) and not board.is_occupied((6, row)):
            rook = board.piece_at((7, row))
            if rook is not None and rook.figure == PieceKind.ROOK and not rook.has_moved:
                yield (7, row)
        if not any(board.is_occupied((col, row)) for col in (1, 2, 3)):
            rook = board.piece_at((0, row))
            if rook is not None and rook.figure == PieceKind.ROOK and not rook.has_moved:
                yield (0, row)

    _GENERATORS = {
        PieceKind.PAWN: _pawn_moves,
        PieceKind.ROOK: _rook_moves,
        PieceKind.KNIGHT: _knight_moves,
        PieceKind.BISHOP: _bishop_moves,
        PieceKind.QUEEN: _queen_moves,
        PieceKind.KING: _king_moves,
    }


class Board:
    """An 8x8 grid recording which piece, if any, stands on each square."""

    def __init__(self) -> None:
        self._grid: list[list[Optional[Piece]]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    @staticmethod
    def _check(square: Square) -> tuple[int, int]:
        x, y = square
        if not _on_board(x, y):
            raise IndexError(f"square {square!r} is off the board")
        return x, y

    def piece_at(self, square: Square) -> Optional[Piece]:
        x, y = self._check(square)
        return self._grid[y][x]

    def is_occupied(self, square: Square) -> bool:
        return self.piece_at(square) is not None

    def __getitem__(self, square: Square) -> Optional[Piece]:
        return self.piece_at(square)

    def __delitem__(self, square: Square) -> None:
        x, y = self._check(square)
        self._grid[y][x] = None

    def clear(self) -> None:
        for row in self._grid:
            row[:] = [None] * BOARD_SIZE

    def place(self, piece: Piece) -> None:
        """Put a piece on the square given by its position."""
        x, y = self._check(piece.position)
        self._grid[y][x] = piece

    def refresh(self, pieces: Iterable[Piece]) -> None:
        """Rebuild the grid from every uncaptured piece standing on the board."""
        self.clear()
        for piece in pieces:
            if not piece.captured and _on_board(*piece.position):
                self.place(piece)