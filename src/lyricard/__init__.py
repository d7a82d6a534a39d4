"""
Lyricard - synced lyrics player with shareable lyric cards.
"""

__version__ = "0.1.0"
