import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Room settings defaults
    DEFAULT_MAX_ROUNDS = int(os.environ.get("DEFAULT_MAX_ROUNDS", "3"))
    DEFAULT_SECONDS_PER_TURN = int(os.environ.get("DEFAULT_SECONDS_PER_TURN", "60"))
    MIN_SECONDS_PER_TURN = int(os.environ.get("MIN_SECONDS_PER_TURN", "10"))
    DEFAULT_MODE = os.environ.get("DEFAULT_MODE", "classic")

    # Game
    REVEAL_GRACE_SEC = int(os.environ.get("REVEAL_GRACE_SEC", "10"))
    MAX_TEXT_LEN = int(os.environ.get("MAX_TEXT_LEN", "140"))
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "6"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
