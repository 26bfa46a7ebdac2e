"""Settings read from the environment. Everything has a default so the engine itself never needs configuring."""

import os

TRUTHY = {"1", "true", "yes", "on"}

DATABASE_URL: str = os.environ.get("CHESS_DATABASE_URL", "sqlite:///chess.db")
DATABASE_ECHO: bool = os.environ.get("CHESS_DATABASE_ECHO", "").lower() in TRUTHY
