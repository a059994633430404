# balance_layout.py
from dataclasses import dataclass
from balance_config import GameConfig

@dataclass
class Dims:
    cell: int
    margin: int
    panel_w: int
    board_w: int
    board_h: int
    total_w: int
    total_h: int
    board_x: int
    board_y: int
    panel_x: int
    panel_y: int
    excess_y: int
    overdraft_y: int

def compute_dims(config: GameConfig) -> Dims:
    cell = config.cell_size
    margin = 16
    panel_w = 200

    board_w = config.board_width
    board_h = config.board_height

    total_w = margin + board_w + margin + panel_w + margin
    total_h = margin + board_h + margin

    board_x = margin
    board_y = margin
    panel_x = board_x + board_w + margin
    panel_y = margin

    return Dims(
        cell=cell, margin=margin, panel_w=panel_w,
        board_w=board_w, board_h=board_h,
        total_w=total_w, total_h=total_h,
        board_x=board_x, board_y=board_y,
        panel_x=panel_x, panel_y=panel_y,
        excess_y=board_y + int(config.excess_y),
        overdraft_y=board_y + int(config.overdraft_y),
    )
