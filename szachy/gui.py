"""Pygame front end: the depth menu and the board where white plays against the engine."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Optional, Union

import pygame

from szachy.bench import DEFAULT_LEAF_DEPTHS, POSITIONS, count_leaves
from szachy.engine import BLACK, WHITE, Game
from szachy.pieces import BOARD_SIZE, PieceKind, Square

TILE_SIZE = 64
SCREEN_WIDTH = TILE_SIZE * BOARD_SIZE
SCREEN_HEIGHT = TILE_SIZE * BOARD_SIZE
WINDOW_TITLE = "Szachy"

DEFAULT_DEPTH = 3
MIN_DEPTH = 1
MAX_DEPTH = 7
DEPTH_STEP = 2
QUIT_CHOICE = 0
TESTS_CHOICE = -1

GAME_OVER_DELAY_MS = 9999
START_FEN = "r3r2k/8/8/4r3/8/8/8/R3K2R w KQkq - 0 1"
DEFAULT_ASSET_DIR = "Tekstury"
FONT_FILE = "Roboto-VariableFont_wdth,wght.ttf"
FONT_SIZE = 32

_CENTRE = SCREEN_WIDTH // 2
TITLE_RECT = (_CENTRE - 150, 50, 300, 50)
RECOMMENDED_RECT = (_CENTRE - 50, 150, 100, 25)
MINUS_RECT = (_CENTRE - 100, 225, 30, 30)
DEPTH_RECT = (_CENTRE - 25, 200, 50, 70)
PLUS_RECT = (_CENTRE + 50, 225, 30, 30)
START_RECT = (_CENTRE - 50, 350, 100, 40)
TESTS_RECT = (_CENTRE + 40, 450, 100, 40)

_TEXT_COLOUR = (255, 255, 255)
_BUTTON_COLOUR = (25, 25, 25)
_BACKGROUND = (0, 0, 0)

_TILE_FILES = {
    "white_tile": "White_tile.png",
    "black_tile": "Black_tile.png",
    "white_highlight": "White_Highlight.png",
    "black_highlight": "Black_Highlight.png",
}
_PIECE_FILES = {
    500: "Chess_rlt60.png", 350: "Chess_nlt60.png", 351: "Chess_blt60.png",
    900: "Chess_qlt60.png", 999: "Chess_klt60.png", 100: "Chess_plt60.png",
    -500: "Chess_rdt60.png", -350: "Chess_ndt60.png", -351: "Chess_bdt60.png",
    -900: "Chess_qdt60.png", -999: "Chess_kdt60.png", -100: "Chess_pdt60.png",
}
_FALLBACK_TILE_COLOURS = {
    "white_tile": (238, 238, 210),
    "black_tile": (118, 150, 86),
    "white_highlight": (246, 246, 105),
    "black_highlight": (186, 202, 43),
}
_PIECE_LETTERS = {
    PieceKind.PAWN: "P",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}

Assets = Mapping[Union[str, int], pygame.Surface]


def square_from_pixel(x: float, y: float) -> Optional[Square]:
    """Return the board square under a pixel, or None when it lies off the board."""
    col, row = int(x // TILE_SIZE), int(y // TILE_SIZE)
    if 0 <= col < BOARD_SIZE and 0 <= row < BOARD_SIZE:
        return (col, row)
    return None


def step_depth(depth: int, delta: int) -> int:
    """Raise or lower the search depth by one step, keeping it within the menu's bounds."""
    if delta == 0:
        raise ValueError("delta must be positive or negative")
    if delta < 0 and depth > MIN_DEPTH:
        return depth - DEPTH_STEP
    if delta > 0 and depth < MAX_DEPTH:
        return depth + DEPTH_STEP
    return depth


def _render_text(font: pygame.font.Font, text: str) -> pygame.Surface:
    return font.render(text, True, _TEXT_COLOUR)


def _blit_into(screen: pygame.Surface, surface: pygame.Surface, rect: pygame.Rect) -> None:
    screen.blit(pygame.transform.smoothscale(surface, rect.size), rect.topleft)


def run_menu(screen: pygame.Surface, font: pygame.font.Font) -> int:
    """Show the depth menu; return the chosen depth, 0 when closed, -1 for the tests."""
    minus, plus = pygame.Rect(MINUS_RECT), pygame.Rect(PLUS_RECT)
    start, tests = pygame.Rect(START_RECT), pygame.Rect(TESTS_RECT)
    labels = [
        (_render_text(font, "Wybierz głębokość: "), pygame.Rect(TITLE_RECT)),
        (_render_text(font, "Rekomendowana 3 "), pygame.Rect(RECOMMENDED_RECT)),
        (_render_text(font, "Testy złożoności"), tests),
        (_render_text(font, "-"), minus),
        (_render_text(font, "+"), plus),
        (_render_text(font, "Start"), start),
    ]
    depth_rect = pygame.Rect(DEPTH_RECT)
    depth = DEFAULT_DEPTH
    clock = pygame.time.Clock()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return QUIT_CHOICE
            if event.type != pygame.MOUSEBUTTONDOWN:
                continue
            if minus.collidepoint(event.pos) and depth > MIN_DEPTH:
                depth = step_depth(depth, -1)
            elif plus.collidepoint(event.pos) and depth < MAX_DEPTH:
                depth = step_depth(depth, 1)
            elif start.collidepoint(event.pos):
                return depth
            elif tests.collidepoint(event.pos):
                return TESTS_CHOICE

        screen.fill(_BACKGROUND)
        for button in (minus, plus, start, tests):
            pygame.draw.rect(screen, _BUTTON_COLOUR, button)
        for surface, rect in labels:
            _blit_into(screen, surface, rect)
        _blit_into(screen, _render_text(font, str(depth)), depth_rect)
        pygame.display.flip()
        clock.tick(60)


def _load_image(path: Path) -> Optional[pygame.Surface]:
    try:
        surface = pygame.image.load(str(path))
    except (pygame.error, FileNotFoundError) as error:
        print(f"Unable to load image {path}! {error}", file=sys.stderr)
        return None
    try:
        return surface.convert_alpha()
    except pygame.error:
        return surface


def _load_assets(directory: Union[str, Path]) -> dict[Union[str, int], pygame.Surface]:
    """Load tile and piece images found in the directory; missing ones are reported and skipped."""
    directory = Path(directory)
    assets: dict[Union[str, int], pygame.Surface] = {}
    for key, name in {**_TILE_FILES, **_PIECE_FILES}.items():
        image = _load_image(directory / name)
        if image is not None:
            assets[key] = image
    return assets


def _draw_fallback_piece(screen, font, figure: int, rect: pygame.Rect) -> None:
    white = figure > 0
    fill, ink = ((250, 250, 250), (0, 0, 0)) if white else ((30, 30, 30), (255, 255, 255))
    pygame.draw.circle(screen, fill, rect.center, TILE_SIZE // 2 - 6)
    pygame.draw.circle(screen, (128, 128, 128), rect.center, TILE_SIZE // 2 - 6, 2)
    letter = font.render(_PIECE_LETTERS[PieceKind(abs(figure))], True, ink)
    screen.blit(letter, letter.get_rect(center=rect.center))


def _render_board(screen: pygame.Surface, game: Game, assets: Assets, font) -> None:
    highlighted = set(game.selected.possible_moves) if game.selected is not None else set()
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            colour = "black" if (col + row) % 2 else "white"
            kind = "highlight" if (col, row) in highlighted else "tile"
            key = f"{colour}_{kind}"
            rect = pygame.Rect(col * TILE_SIZE, row * TILE_SIZE, TILE_SIZE, TILE_SIZE)
            image = assets.get(key)
            if image is not None:
                _blit_into(screen, image, rect)
            else:
                screen.fill(_FALLBACK_TILE_COLOURS[key], rect)
    for side in game.pieces:
        for piece in side:
            col, row = piece.position
            if piece.captured or col >= BOARD_SIZE or row >= BOARD_SIZE:
                continue
            rect = pygame.Rect(col * TILE_SIZE, row * TILE_SIZE, TILE_SIZE, TILE_SIZE)
            image = assets.get(piece.figure)
            if image is not None:
                screen.blit(image, rect.topleft)
            else:
                _draw_fallback_piece(screen, font, piece.figure, rect)


def _game_result(game: Game, color: int) -> Optional[str]:
    if game.is_checkmate(color):
        return "CHECKMATE! White wins!" if color == BLACK else "CHECKMATE! Black wins!"
    if game.is_stalemate(color):
        return "STALEMATE! It's a draw."
    return None


def run_game(game: Game, depth: int, screen: pygame.Surface, assets: Assets) -> Optional[str]:
    """Play white by mouse against the engine; return the final result, or None if closed."""
    if depth < 1:
        raise ValueError("search depth must be at least 1")
    pygame.font.init()
    font = pygame.font.Font(None, TILE_SIZE // 2)
    clock = pygame.time.Clock()
    result: Optional[str] = None

    while True:
        quit_requested = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            if (
                result is None
                and game.white_turn
                and event.type == pygame.MOUSEBUTTONDOWN
                and event.button == 1
            ):
                square = square_from_pixel(*event.pos)
                if square is not None:
                    game.select(square)

        if result is None and not game.white_turn:
            result = _game_result(game, BLACK)
            if result is None:
                game.apply_ai_move(game.best_move(depth))
                result = _game_result(game, WHITE)
            if result is not None:
                print(result)

        screen.fill(_BACKGROUND)
        _render_board(screen, game, assets, font)
        pygame.display.flip()

        if result is not None:
            pygame.time.wait(GAME_OVER_DELAY_MS)
            return result
        if quit_requested:
            return None
        clock.tick(60)


def _open_font(directory: Path) -> pygame.font.Font:
    path = directory / FONT_FILE
    if path.is_file():
        try:
            return pygame.font.Font(str(path), FONT_SIZE)
        except (pygame.error, OSError) as error:
            print(f"Failed to load font! {error}", file=sys.stderr)
    return pygame.font.Font(None, FONT_SIZE)


def _count_all_leaves() -> None:
    print("TESTY")
    for name in sorted(POSITIONS):
        print(f"Testing position: {name}")
        for depth in DEFAULT_LEAF_DEPTHS:
            count_leaves(depth, POSITIONS[name])


def main(argv: Optional[list[str]] = None) -> int:
    """Open the menu, then play a game or count search leaves on the test positions."""
    parser = argparse.ArgumentParser(prog="szachy", description=main.__doc__)
    parser.add_argument("--assets", default=DEFAULT_ASSET_DIR, help="directory of images and font")
    parser.add_argument("--fen", default=START_FEN, help="position to start the game from")
    args = parser.parse_args(argv)

    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
    except pygame.error as error:
        print(f"Window could not be created! {error}", file=sys.stderr)
        pygame.quit()
        return 1

    asset_dir = Path(args.assets)
    try:
        choice = run_menu(screen, _open_font(asset_dir))
        if choice > 0:
            game = Game()
            game.load_fen(args.fen)
            for side in game.pieces:
                for piece in side:
                    piece.has_moved = False
            run_game(game, choice, screen, _load_assets(asset_dir))
        elif choice == TESTS_CHOICE:
            pygame.display.quit()
            _count_all_leaves()
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())