
"""
Rendering helpers for the balance game.

- Pre-render one cell Surface per block kind and blit it.
- Pre-render the static background (grid, safe band, panel frame).
- Cache the BOARD SURFACE with all stacked blocks; rebuild it only when the
  grid snapshot changes.
- Cache HUD text surfaces; re-render only when values change.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Dict, Tuple, Optional
from balance_layout import Dims
from balance_piece import Kind
from balance_game import GameSnapshot, State

COLORS: Dict[Kind, Tuple[int,int,int]] = {
    Kind.INFLOW: (74,158,255),
    Kind.OUTFLOW: (255,107,107),
}
EDGES: Dict[Kind, Tuple[int,int,int]] = {
    Kind.INFLOW: (45,90,160),
    Kind.OUTFLOW: (204,0,0),
}
BAND = (76,175,80)
MARKER = (255,235,59)
TEXT = (200,210,240)

@dataclass
class HudCache:
    seconds: int = -1
    balance: Optional[float] = None
    blocks: int = -1
    warning: Optional[int] = None
    touches: Optional[Tuple[int,int]] = None
    title: Optional[pygame.Surface] = None
    time_s: Optional[pygame.Surface] = None
    balance_s: Optional[pygame.Surface] = None
    blocks_s: Optional[pygame.Surface] = None
    warning_s: Optional[pygame.Surface] = None
    touches_s: Optional[pygame.Surface] = None
    controls: Optional[list] = None

class RenderAssets:
    """Holds pre-rendered assets and draws a GameSnapshot."""
    def __init__(self, dims: Dims, font: pygame.font.Font, big_font: pygame.font.Font):
        self.dims = dims
        self.font = font
        self.big_font = big_font
        self._make_static()
        self._make_cells()
        self.hud = HudCache()
        self.board_surface = pygame.Surface((dims.board_w, dims.board_h), pygame.SRCALPHA)
        self._board_key = None

    # ---------- Static background (grid + safe band + panel) ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((26,26,46))
        band = pygame.Surface((d.board_w, d.overdraft_y - d.excess_y), pygame.SRCALPHA)
        band.fill(BAND + (64,))
        self.bg.blit(band, (d.board_x, d.excess_y))
        grid_col = (40,50,90)
        for x in range(d.board_w // d.cell + 1):
            X = d.board_x + x*d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(d.board_h // d.cell + 1):
            Y = d.board_y + y*d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        for Y in (d.excess_y, d.overdraft_y):
            pygame.draw.line(self.bg, BAND, (d.board_x, Y), (d.board_x + d.board_w, Y), 3)
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.board_h)
        pygame.draw.rect(self.bg, (21,25,53), panel_rect)
        pygame.draw.rect(self.bg, (50,60,100), panel_rect, 1)

    # ---------- Cell sprites ----------
    def _make_cells(self):
        self.cell_surf: Dict[Kind, pygame.Surface] = {}
        c = self.dims.cell
        for k, col in COLORS.items():
            s = pygame.Surface((c, c))
            s.fill(col)
            pygame.draw.rect(s, EDGES[k], (0,0,c,c), 2)
            self.cell_surf[k] = s

    # ---------- Board surface cache ----------
    def rebuild_board_surface(self, grid):
        """Rebuilds the stacked-blocks surface if the grid changed."""
        if grid == self._board_key:
            return
        self.board_surface.fill((0,0,0,0))
        c = self.dims.cell
        for y, row in enumerate(grid):
            for x, k in enumerate(row):
                if k is not None:
                    self.board_surface.blit(self.cell_surf[k], (x*c, y*c))
        self._board_key = grid

    # ---------- Frame ----------
    def draw(self, screen: pygame.Surface, snap: GameSnapshot):
        d = self.dims
        screen.blit(self.bg, (0,0))
        self.rebuild_board_surface(snap.grid)
        screen.blit(self.board_surface, (d.board_x, d.board_y))
        if snap.piece is not None:
            # piece y is in pixels, not rows
            for r, line in enumerate(snap.piece.shape):
                for c, v in enumerate(line):
                    if v:
                        screen.blit(self.cell_surf[snap.piece.kind],
                                    (d.board_x + (snap.piece.x + c)*d.cell, d.board_y + snap.piece.y + r*d.cell))
        if snap.balance is not None:
            self.draw_balance_marker(screen, snap.balance)
        self.draw_panel_hud(screen, snap)
        if snap.state is State.ENDED:
            self.draw_banner(screen, f"GAME OVER: {snap.cause}", "Enter to restart")
        elif snap.state is State.IDLE:
            self.draw_banner(screen, "BALANCE", "Enter to start")

    def draw_balance_marker(self, screen: pygame.Surface, balance: float):
        d = self.dims
        y = d.board_y + int(d.board_h * (1 - balance / 100))
        for x in range(d.board_x, d.board_x + d.board_w, 10):
            pygame.draw.line(screen, MARKER, (x, y), (min(x + 5, d.board_x + d.board_w), y), 4)
        cx = d.board_x + d.board_w // 2
        pygame.draw.circle(screen, MARKER, (cx, y), 8)
        pygame.draw.circle(screen, (255,255,255), (cx, y), 8, 2)

    def draw_banner(self, screen: pygame.Surface, title: str, hint: str):
        d = self.dims
        center = (d.board_x + d.board_w // 2, d.board_y + d.board_h // 2)
        msg = self.big_font.render(title, True, (255,220,220))
        screen.blit(msg, msg.get_rect(center=center))
        sub = self.font.render(hint, True, TEXT)
        screen.blit(sub, sub.get_rect(center=(center[0], center[1] + 36)))

    # ---------- HUD / Panel ----------
    def draw_panel_hud(self, screen: pygame.Surface, snap: GameSnapshot):
        d = self.dims
        f = self.font
        seconds = int(snap.elapsed_ms // 1000)
        if self.hud.title is None:
            self.hud.title = f.render("Balance", True, (197,202,233))
        if seconds != self.hud.seconds:
            self.hud.seconds = seconds
            self.hud.time_s = f.render(f"Time: {seconds}s", True, TEXT)
        if snap.balance != self.hud.balance:
            self.hud.balance = snap.balance
            self.hud.balance_s = None if snap.balance is None else f.render(f"Balance: {round(snap.balance)}%", True, TEXT)
        if snap.blocks_placed != self.hud.blocks:
            self.hud.blocks = snap.blocks_placed
            self.hud.blocks_s = f.render(f"Blocks: {snap.blocks_placed}", True, TEXT)
        touches = None if snap.balance is not None else (snap.excess_touches, snap.overdraft_touches)
        if touches != self.hud.touches:
            self.hud.touches = touches
            self.hud.touches_s = None if touches is None else f.render(f"Excess {touches[0]} / Overdraft {touches[1]}", True, TEXT)
        warning = None if snap.warning_remaining_ms is None else int(snap.warning_remaining_ms // 1000) + 1
        if warning != self.hud.warning:
            self.hud.warning = warning
            self.hud.warning_s = None if warning is None else f.render(f"Back to band: {warning}s", True, (255,120,120))
        screen.blit(self.hud.title, (d.panel_x + 12, d.panel_y + 12))
        y = d.panel_y + 44
        for s in (self.hud.time_s, self.hud.balance_s, self.hud.blocks_s, self.hud.touches_s, self.hud.warning_s):
            if s:
                screen.blit(s, (d.panel_x + 12, y)); y += 24
        if not self.hud.controls:
            self.hud.controls = [
                f.render("Controls:", True, TEXT),
                f.render("←/→ Move", True, (165,175,215)),
                f.render("↑ Rotate", True, (165,175,215)),
                f.render("↓ Fast drop", True, (165,175,215)),
                f.render("Enter/R Restart", True, (165,175,215)),
            ]
        y = d.panel_y + 200
        for surf in self.hud.controls:
            screen.blit(surf, (d.panel_x + 12, y)); y += 20
