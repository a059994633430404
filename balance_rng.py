
"""Seedable LCG random source for piece spawning"""
import pygame
from typing import Optional

class LCGRandom:
    """32-bit LCG exposing the two calls spawning needs: randrange and random."""
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = pygame.time.get_ticks() & 0xFFFFFFFF
        self.seed = seed & 0xFFFFFFFF
        self.state = self.seed

    def _lcg_next(self):
        self.state = (self.state * 0x41C64E6D + 0x3039) & 0xFFFFFFFF
        return self.state

    def _rand(self):
        return (self._lcg_next() >> 16) & 0x7FFF

    def randrange(self, n: int) -> int:
        """Index in [0, n) from a 15-bit draw reduced mod n.

        Only near-uniform for small bounds such as the shape catalog and the
        board columns; the bias grows as n approaches 32768.
        """
        if n <= 0:
            raise ValueError("randrange() needs a positive bound")
        return self._rand() % n

    def random(self) -> float:
        return self._rand() / 0x8000
