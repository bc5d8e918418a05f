"""Gamers Challenge quiz backend"""

__version__ = "1.0.0"
