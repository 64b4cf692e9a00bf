"""
Constants, configuration, and small helpers for the Shogi engine.

This module provides:
- Board geometry and player identifiers
- Coordinate notation helpers (kifu style)
- Display constants and color definitions for the front end
- CPU difficulty and timing settings
"""

from typing import Dict

# 盤面の基本設定
BOARD_SIZE = 9

# 手番 (先手=黒, 後手=白)
BLACK = 0
WHITE = 1

# ウィンドウの基本設定
SQUARE = 64
BOARD_PIXEL_WIDTH = SQUARE * BOARD_SIZE
BOARD_PIXEL_HEIGHT = SQUARE * BOARD_SIZE

COORD_MARGIN = 30
WINDOW_PADDING_X = 50
WINDOW_PADDING_Y = 40
HAND_AREA_HEIGHT = 70

KIFU_WINDOW_WIDTH = 260
INFO_PANEL_HEIGHT = 80
KIFU_ITEM_HEIGHT = 20

WIDTH = (BOARD_PIXEL_WIDTH + WINDOW_PADDING_X * 2 + KIFU_WINDOW_WIDTH +
         WINDOW_PADDING_X + COORD_MARGIN * 2)
HEIGHT = (WINDOW_PADDING_Y + HAND_AREA_HEIGHT + BOARD_PIXEL_HEIGHT +
          HAND_AREA_HEIGHT + WINDOW_PADDING_Y + COORD_MARGIN * 2)

BOARD_START_X = WINDOW_PADDING_X + COORD_MARGIN
BOARD_START_Y = WINDOW_PADDING_Y + HAND_AREA_HEIGHT + COORD_MARGIN
FPS = 60

# CPU の着手前に待つ時間 (表示用)
CPU_MOVE_DELAY_MS = 200

# 色の定義
WHITE_COLOR = (223, 235, 234)
BLACK_COLOR = (20, 20, 20)
GRAY = (171, 214, 211)
LIGHT_GRAY = (220, 220, 200)
GREEN = (120, 255, 120)
RED = (255, 80, 80)
BLUE = (120, 160, 255)
TATAMI_GREEN = (140, 164, 138)
DARK_BROWN = (50, 44, 40)
BOARD_COLOR = (187, 155, 82)
KOMA_COLOR = (242, 216, 154)
KOMA_EDGE = (116, 77, 29)

# 座標系と表示関連
JAPANESE_Y_COORDS = ['一', '二', '三', '四', '五', '六', '七', '八', '九']
JAPANESE_TURN_SYMBOL = {BLACK: '▲', WHITE: '△'}
JAPANESE_TURN_NAME = {BLACK: '先手', WHITE: '後手'}

# CPU難易度設定
CPU_DIFFICULTIES: Dict[str, str] = {'入門': 'beginner', '初級': 'easy'}

# 駒落ち (上手=後手から取り除く駒)
HANDICAPS: Dict[str, list] = {
    '平手': [],
    '香落ち': ['L'],
    '角落ち': ['B'],
    '飛車落ち': ['R'],
    '飛香落ち': ['R', 'L'],
    '二枚落ち': ['R', 'B'],
}


def in_bounds(row: int, col: int) -> bool:
    """座標が盤面内かチェック"""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def opponent(player: int) -> int:
    """相手の手番を返す"""
    return WHITE if player == BLACK else BLACK


def coords_to_kifu(row: int, col: int) -> str:
    """盤上座標を棋譜記法に変換 (列0が9筋)"""
    return f"{BOARD_SIZE - col}{JAPANESE_Y_COORDS[row]}"
