"""Replay of recorded games for offline training."""

from .loader import GameRecord, GameRecordLoader

__all__ = ["GameRecord", "GameRecordLoader"]
