# runegather/__init__.py
"""Runic-matrix resource gathering minigame engine."""

__version__ = "0.1.0"
