from .models import HistoryEntry, Session, SessionStage, SessionUpdate
from .service import GameEngine

__all__ = [
    "GameEngine",
    "HistoryEntry",
    "Session",
    "SessionStage",
    "SessionUpdate",
]
