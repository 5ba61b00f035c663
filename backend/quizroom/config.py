import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Blank picks eventlet where it is supported, threading otherwise.
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Quiz
    DEFAULT_MAX_PLAYERS = int(os.environ.get("DEFAULT_MAX_PLAYERS", "10"))
    DEFAULT_TIME_LIMIT_SEC = int(os.environ.get("DEFAULT_TIME_LIMIT_SEC", "15"))
    COUNTDOWN_INTERVAL_SEC = float(os.environ.get("COUNTDOWN_INTERVAL_SEC", "1"))
    REVEAL_DELAY_SEC = float(os.environ.get("REVEAL_DELAY_SEC", "2.5"))
    INTER_QUESTION_DELAY_SEC = float(os.environ.get("INTER_QUESTION_DELAY_SEC", "5"))
    FINAL_LEADERBOARD_DELAY_SEC = float(os.environ.get("FINAL_LEADERBOARD_DELAY_SEC", "8"))
    LEADERBOARD_TOP_N = int(os.environ.get("LEADERBOARD_TOP_N", "5"))
    AUTO_ADVANCE = os.environ.get("AUTO_ADVANCE", "1") == "1"
    NOTIFY_PLAYERS_ON_HOST_DISCONNECT = os.environ.get("NOTIFY_PLAYERS_ON_HOST_DISCONNECT", "0") == "1"
