# szachy

Play chess as White against a computer opponent that plays Black. The opponent
looks ahead with a negamax search and alpha-beta pruning. It scores positions
by material only.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Playing

```
szachy [--assets DIR] [--fen FEN]
```

A menu opens first. The search depth starts at 3. The `-` and `+` buttons change
it two plies at a time, between 1 and 7. Press **Start** to begin a game.
Higher depths make the opponent much slower.

On the board, click a white piece to select it. The squares it can legally move
to are highlighted. Click one of them to make the move. Clicking any other
square deselects the piece. To castle, click your king and then the rook.
A pawn that reaches the last rank always becomes a queen. When the game ends in
checkmate or stalemate, the result is printed to the console. The window closes
about ten seconds later.

Options:

- `--assets DIR`: the directory holding the tile and piece images and the
  menu font. It defaults to `Tekstury`. If an image is missing, the board draws
  plain coloured squares or lettered discs in its place. If the font is missing,
  pygame's default font is used.
- `--fen FEN`: the position the game starts from. Only the piece placement field
  is read. The default is a small rook endgame,
  `r3r2k/8/8/4r3/8/8/8/R3K2R w KQkq - 0 1`. It is not the normal starting
  position.

The **Testy złożoności** button in the menu does not start a game. It runs the
leaf count described below and prints the results to the console.

## Benchmark

```
szachy-bench [--depths N ...]
szachy-bench --bench DEPTH [--runs N] [--output-dir DIR]
```

The command uses four fixed positions, all with Black to move: Starting,
Sicilian, Middlegame and Endgame.

Without `--bench`, it searches each position for Black at each given depth.
The default depths are 1, 3, 5 and 7. For each search it prints how many leaf
positions the search visited.

With `--bench DEPTH`, it times `--runs` searches of each position at that
depth. `--runs` defaults to 1. The timings are written to two files in
`--output-dir`, which defaults to the current directory:

- `szachy_test_depth_DEPTH.csv` holds one line per run. Each line gives the
  time in milliseconds and the move that was chosen.
- `szachy_avg_depth_DEPTH.csv` holds the average time for each position.

## Library use

You can use the engine without the graphical interface:

```python
import random
from szachy.engine import Game

game = Game()
game.load_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1")
move = game.best_move(3, random.Random(0))
game.apply_ai_move(move)
print(move.piece.figure, move.start, move.end)
```

Notes on the `Game` methods:

- `best_move` picks one of Black's best-scoring moves at random, without
  playing it.
- `apply_ai_move` plays that move and gives the turn back to White.
- `try_white_move` plays a move for White. `select` does the same thing in
  response to a click on a square.
- `generate_legal_moves`, `is_checkmate` and `is_stalemate` take a colour index:
  0 for White and 1 for Black.
- `debug_dump` returns text grids of the board.

Squares are `(column, row)` tuples, with row 0 at Black's side of the board.

The pieces and the board are defined in `szachy.pieces`. Each piece is a
`Piece`, identified by its signed value from `PieceKind`; black pieces have
negative values. Each `Piece` generates its own pseudo-legal moves on a `Board`.

## Limitations

- The rules do not include en passant.
- The game is never drawn by repetition, by the fifty-move rule or by
  insufficient material.
- A pawn can only be promoted to a queen.
- The computer always plays Black.
- From a FEN string, only the piece placement field is used. The fields for side
  to move, castling rights, en passant square and move counters are ignored.