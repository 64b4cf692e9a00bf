"""
pygame front end for the Shogi engine.

This module provides:
- Board, hand, and kifu panel drawing
- Click handling that only offers moves from the engine's candidate set
- Promotion dialog when both variants are offered
- Human vs CPU game loop with furigoma (random side selection)

Keys: U = 待った (undo), R = new game, Esc = quit.
"""

import random
import sys
from typing import Any, Dict, List, Optional, Tuple

import pygame

from .board import Position
from .game import Match, make_policy
from .piece import HAND_ORDER, Piece, piece_label
from .rules import BoardMove, Move
from .utils import (
    BOARD_SIZE, BLACK, WHITE, SQUARE, BOARD_PIXEL_WIDTH, BOARD_PIXEL_HEIGHT,
    COORD_MARGIN, WINDOW_PADDING_X, WINDOW_PADDING_Y, HAND_AREA_HEIGHT,
    KIFU_WINDOW_WIDTH, INFO_PANEL_HEIGHT, KIFU_ITEM_HEIGHT, WIDTH, HEIGHT,
    BOARD_START_X, BOARD_START_Y, FPS, CPU_MOVE_DELAY_MS,
    WHITE_COLOR, BLACK_COLOR, GRAY, GREEN, RED, BLUE, TATAMI_GREEN, DARK_BROWN,
    BOARD_COLOR, KOMA_COLOR, KOMA_EDGE, JAPANESE_Y_COORDS, JAPANESE_TURN_NAME
)

# 日本語を表示できるフォント候補 (SysFont はカンマ区切りで順に探す)
JAPANESE_FONT_NAMES = ("notosanscjkjp,notoserifcjkjp,ipaexmincho,ipamincho,"
                       "yumincho,msmincho,hiraginominchopron,takaomincho")

# グローバルフォントオブジェクト（遅延初期化）
FONT = LARGE_FONT = PIECE_FONT = SMALL_PIECE_FONT = None


def _load_fonts():
    """フォントを読み込む。失敗時は pygame 既定フォントにフォールバック"""
    try:
        return (pygame.font.SysFont(JAPANESE_FONT_NAMES, 18),
                pygame.font.SysFont(JAPANESE_FONT_NAMES, 24),
                pygame.font.SysFont(JAPANESE_FONT_NAMES, 34),
                pygame.font.SysFont(JAPANESE_FONT_NAMES, 20))
    except (pygame.error, OSError) as e:
        print(f"フォントの読み込みに失敗しました: {e}")
        return (pygame.font.Font(None, 18), pygame.font.Font(None, 24),
                pygame.font.Font(None, 34), pygame.font.Font(None, 20))


def initialize_fonts():
    """フォントを初期化する（pygame.init()後に呼び出す）"""
    global FONT, LARGE_FONT, PIECE_FONT, SMALL_PIECE_FONT
    if FONT is None:
        FONT, LARGE_FONT, PIECE_FONT, SMALL_PIECE_FONT = _load_fonts()


class View:
    """画面側の選択状態"""

    def __init__(self, match: Match, player_side: int):
        self.match = match
        self.player_side = player_side
        self.selected: Optional[Position] = None
        self.selected_drop: Optional[str] = None
        self.legal_moves: List[Move] = []
        self.hand_rects: Dict[Tuple[int, str], pygame.Rect] = {}

    def clear_selection(self) -> None:
        self.selected, self.selected_drop, self.legal_moves = None, None, []

    def undo_steps(self) -> int:
        """待ったで戻す手数。直前の着手 (投了を含む) が CPU なら人間の手まで戻す。"""
        history = self.match.history
        if not history:
            return 0
        return 1 if history[-1]['state'].turn == self.player_side else 2

    @property
    def status(self) -> str:
        winner = self.match.winner
        if winner is not None:
            return 'あなたの勝ち' if winner == self.player_side else 'CPUの勝ち'
        return 'あなたの手番' if self.match.state.turn == self.player_side else 'CPUの手番'


def square_rect(row: int, col: int) -> pygame.Rect:
    return pygame.Rect(BOARD_START_X + col * SQUARE, BOARD_START_Y + row * SQUARE, SQUARE, SQUARE)


def hand_area_y(owner: int) -> int:
    if owner == BLACK:
        return BOARD_START_Y + BOARD_PIXEL_HEIGHT + COORD_MARGIN
    return BOARD_START_Y - COORD_MARGIN - HAND_AREA_HEIGHT


def draw_piece(screen, piece: Piece, center: Tuple[int, int]) -> None:
    """駒を五角形と文字で描画 (後手の駒は180度回転)"""
    cx, cy = center
    half = SQUARE // 2 - 4
    points = [(cx, cy - half), (cx + half - 6, cy - half + 10), (cx + half - 2, cy + half),
              (cx - half + 2, cy + half), (cx - half + 6, cy - half + 10)]
    if piece.owner == WHITE:
        points = [(2 * cx - x, 2 * cy - y) for x, y in points]
    pygame.draw.polygon(screen, KOMA_COLOR, points)
    pygame.draw.polygon(screen, KOMA_EDGE, points, 2)

    label = piece_label(piece)
    font = PIECE_FONT if len(label) == 1 else SMALL_PIECE_FONT
    text = font.render(label, True, RED if piece.promoted else BLACK_COLOR)
    if piece.owner == WHITE:
        text = pygame.transform.rotate(text, 180)
    screen.blit(text, text.get_rect(center=(cx, cy + (2 if piece.owner == BLACK else -2))))


def draw_board(screen, view: View) -> None:
    """盤面・座標・駒・ハイライトを描画"""
    margin_rect = pygame.Rect(BOARD_START_X - COORD_MARGIN, BOARD_START_Y - COORD_MARGIN,
                              BOARD_PIXEL_WIDTH + COORD_MARGIN * 2,
                              BOARD_PIXEL_HEIGHT + COORD_MARGIN * 2)
    pygame.draw.rect(screen, BOARD_COLOR, margin_rect)

    for i in range(BOARD_SIZE + 1):
        line_width = 2 if i in (0, BOARD_SIZE) else 1
        pygame.draw.line(screen, BLACK_COLOR, (BOARD_START_X + i * SQUARE, BOARD_START_Y),
                         (BOARD_START_X + i * SQUARE, BOARD_START_Y + BOARD_PIXEL_HEIGHT), line_width)
        pygame.draw.line(screen, BLACK_COLOR, (BOARD_START_X, BOARD_START_Y + i * SQUARE),
                         (BOARD_START_X + BOARD_PIXEL_WIDTH, BOARD_START_Y + i * SQUARE), line_width)

    # 座標表示 (上に筋、右に段)
    for i in range(BOARD_SIZE):
        num = FONT.render(str(BOARD_SIZE - i), True, BLACK_COLOR)
        screen.blit(num, num.get_rect(center=(BOARD_START_X + i * SQUARE + SQUARE // 2,
                                              BOARD_START_Y - COORD_MARGIN // 2)))
        kanji = FONT.render(JAPANESE_Y_COORDS[i], True, BLACK_COLOR)
        screen.blit(kanji, kanji.get_rect(center=(BOARD_START_X + BOARD_PIXEL_WIDTH + COORD_MARGIN // 2,
                                                  BOARD_START_Y + i * SQUARE + SQUARE // 2)))

    if view.selected is not None:
        pygame.draw.rect(screen, BLUE, square_rect(*view.selected), 3)

    board = view.match.state.board
    for move in view.legal_moves:
        color = RED if board[move.to.row][move.to.col] else GREEN
        pygame.draw.rect(screen, color, square_rect(*move.to), 3)

    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            p = board[r][c]
            if p:
                draw_piece(screen, p, square_rect(r, c).center)


def draw_hands(screen, view: View) -> None:
    """持ち駒を種類ごとに枚数付きで描画"""
    view.hand_rects = {}
    for owner in (BLACK, WHITE):
        y = hand_area_y(owner)
        pygame.draw.rect(screen, DARK_BROWN, (BOARD_START_X, y, BOARD_PIXEL_WIDTH, HAND_AREA_HEIGHT))
        hand = view.match.state.captured[owner]
        kinds = [k for k in HAND_ORDER if k in hand]
        for i, kind in enumerate(kinds):
            rect = pygame.Rect(BOARD_START_X + i * SQUARE, y + (HAND_AREA_HEIGHT - SQUARE) // 2,
                               SQUARE, SQUARE)
            view.hand_rects[(owner, kind)] = rect
            draw_piece(screen, Piece(kind, owner), rect.center)
            count = hand.count(kind)
            if count > 1:
                screen.blit(FONT.render(f"×{count}", True, WHITE_COLOR), (rect.right - 22, rect.bottom - 20))
            if owner == view.match.state.turn and view.selected_drop == kind:
                pygame.draw.rect(screen, BLUE, rect, 3)


def draw_kifu(screen, view: View) -> None:
    """棋譜パネルを描画"""
    x = BOARD_START_X + BOARD_PIXEL_WIDTH + COORD_MARGIN + WINDOW_PADDING_X
    y = WINDOW_PADDING_Y
    area = pygame.Rect(x, y, KIFU_WINDOW_WIDTH, HEIGHT - WINDOW_PADDING_Y * 2)
    pygame.draw.rect(screen, WHITE_COLOR, area)
    pygame.draw.rect(screen, BLACK_COLOR, area, 2)
    info = pygame.Rect(x, y, KIFU_WINDOW_WIDTH, INFO_PANEL_HEIGHT)
    pygame.draw.rect(screen, GRAY, info)
    pygame.draw.rect(screen, BLACK_COLOR, info, 2)

    match = view.match
    info_texts = [
        f"あなた: {JAPANESE_TURN_NAME[view.player_side]}  手数: {len(match.kifu)}",
        f"手番: {JAPANESE_TURN_NAME[match.state.turn]}",
        view.status,
    ]
    for i, text in enumerate(info_texts):
        screen.blit(FONT.render(text, True, BLACK_COLOR), (x + 10, y + 5 + i * 24))

    list_y = y + INFO_PANEL_HEIGHT + 10
    max_lines = (area.bottom - list_y - 10) // KIFU_ITEM_HEIGHT
    start = max(0, len(match.kifu) - max_lines)
    for i, line in enumerate(match.kifu[start:]):
        screen.blit(FONT.render(f"{start + i + 1}. {line}", True, BLACK_COLOR),
                    (x + 15, list_y + i * KIFU_ITEM_HEIGHT))


def draw_game_elements(screen, view: View) -> None:
    """ゲーム要素を描画"""
    screen.fill(TATAMI_GREEN)
    draw_board(screen, view)
    draw_hands(screen, view)
    draw_kifu(screen, view)
    pygame.display.flip()


def ask_promotion(screen) -> bool:
    """成りの選択ダイアログを表示"""
    dialog = pygame.Surface((300, 150))
    dialog.fill(GRAY)
    dialog_rect = dialog.get_rect(center=(WIDTH // 2, HEIGHT // 2))
    pygame.draw.rect(dialog, BLACK_COLOR, dialog.get_rect(), 3)

    title = LARGE_FONT.render("成りますか?", True, BLACK_COLOR)
    dialog.blit(title, title.get_rect(center=(dialog.get_width() // 2, 40)))

    yes_rect, no_rect = pygame.Rect(50, 80, 80, 40), pygame.Rect(170, 80, 80, 40)
    pygame.draw.rect(dialog, GREEN, yes_rect)
    pygame.draw.rect(dialog, RED, no_rect)
    dialog.blit(LARGE_FONT.render("はい", True, BLACK_COLOR), (65, 85))
    dialog.blit(LARGE_FONT.render("いいえ", True, BLACK_COLOR), (175, 85))

    screen.blit(dialog, dialog_rect.topleft)
    pygame.display.flip()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                sys.exit()
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if yes_rect.move(dialog_rect.topleft).collidepoint(event.pos):
                    return True
                elif no_rect.move(dialog_rect.topleft).collidepoint(event.pos):
                    return False


def pick_move_candidate(screen, candidates: List[Move]) -> Optional[Move]:
    """同じ行き先の候補が成・不成の二通りなら確認する"""
    if len(candidates) <= 1:
        return candidates[0] if candidates else None
    promote = next((m for m in candidates if isinstance(m, BoardMove) and m.promote), None)
    normal = next((m for m in candidates if not (isinstance(m, BoardMove) and m.promote)), None)
    if promote is None or normal is None:
        return candidates[0]
    return promote if ask_promotion(screen) else normal


def handle_click(screen, view: View, pos: Tuple[int, int]) -> None:
    """盤面・持ち駒クリック処理"""
    match = view.match
    if match.game_over or match.state.turn != view.player_side:
        return

    for (owner, kind), rect in view.hand_rects.items():
        if owner == view.player_side and rect.collidepoint(pos):
            view.selected, view.selected_drop = None, kind
            view.legal_moves = match.legal_moves(drop=kind)
            return

    mx, my = pos
    col, row = (mx - BOARD_START_X) // SQUARE, (my - BOARD_START_Y) // SQUARE
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        view.clear_selection()
        return

    target = Position(row, col)
    candidates = [m for m in view.legal_moves if m.to == target]
    move = pick_move_candidate(screen, candidates)
    if move is not None:
        match.play(move)
        view.clear_selection()
        return

    p = match.state.board[row][col]
    if p and p.owner == view.player_side:
        view.selected, view.selected_drop = target, None
        view.legal_moves = match.legal_moves(from_pos=target)
    else:
        view.clear_selection()


def new_match(settings: Dict[str, Any], rng: random.Random) -> View:
    """振り駒で手番を決めて対局を作る"""
    player_side = settings.get('player_side')
    if player_side is None:
        player_side = rng.choice((BLACK, WHITE))
    cpu = make_policy(settings.get('cpu_diff', 'beginner'), rng)
    if player_side == BLACK:
        match = Match(black=None, white=cpu, handicap=settings.get('handicap', '平手'))
    else:
        match = Match(black=cpu, white=None, handicap=settings.get('handicap', '平手'))
    return View(match, player_side)


def main(initial_settings: Optional[Dict[str, Any]] = None):
    """メインエントリポイント"""
    settings = dict(initial_settings or {})
    rng = random.Random(settings.get('seed'))

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("将棋")
    initialize_fonts()
    clock = pygame.time.Clock()

    view = new_match(settings, rng)
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_r:
                    view = new_match(settings, rng)
                elif event.key == pygame.K_u:
                    # CPU の手も一緒に戻して自分の手番に戻す
                    view.match.undo(view.undo_steps())
                    view.clear_selection()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                handle_click(screen, view, event.pos)

        draw_game_elements(screen, view)

        if running and view.match.is_cpu_turn():
            pygame.time.wait(CPU_MOVE_DELAY_MS)
            view.match.step()
            # 人間側に指し手がなければ負け
            if not view.match.game_over and not view.match.legal_moves():
                view.match.resign()

        clock.tick(FPS)

    pygame.quit()


if __name__ == "__main__":
    main()
