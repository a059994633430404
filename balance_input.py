
"""Keyboard routing and held-key auto-shift"""
import pygame
from balance_config import CONFIG

class ShiftRepeat:
    def __init__(self):
        self.dir=0; self.held_ms=0; self.last=0; self.initial=False
    def update(self, dt, left, right):
        nd=(-1 if left else 0)+(1 if right else 0)
        if nd!=self.dir:
            self.dir=nd; self.held_ms=0; self.last=0; self.initial=False
        if self.dir==0: return 0
        self.held_ms+=dt
        if not self.initial:
            self.initial=True; return self.dir
        if self.held_ms < CONFIG["DAS_MS"]: return 0
        arr=CONFIG["ARR_MS"]
        if arr==0: return self.dir
        self.last+=dt
        if self.last>=arr:
            self.last=0; return self.dir
        return 0

class KeyRouter:
    """Turns pygame events and held keys into Game calls."""
    START_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_r)

    def __init__(self, game):
        self.game = game
        self.shift = ShiftRepeat()

    def handle(self, e):
        if e.type == pygame.KEYDOWN:
            if e.key in self.START_KEYS:
                self.game.start(); self.shift = ShiftRepeat(); return
            if e.key == pygame.K_UP: self.game.rotate()
            if e.key == pygame.K_DOWN: self.game.set_soft_drop(True)
        elif e.type == pygame.KEYUP:
            if e.key == pygame.K_DOWN: self.game.set_soft_drop(False)

    def update(self, dt, left, right):
        step = self.shift.update(dt, left, right)
        if step: self.game.move(step)
        return step
