from supportbot.models.chat import ChatSession, Turn, TurnRole

__all__ = [
    "ChatSession", "Turn", "TurnRole",
]
