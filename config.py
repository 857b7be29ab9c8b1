# config.py

import os
import secrets


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Settings for the web app, read once from the environment.

    Attributes
    ----------
    SECRET_KEY:
        Signs the session cookie.  ``DLV_SECRET_KEY``; random per process
        when unset, which logs everyone out on restart.
    HOST, PORT:
        Bind address for ``python main.py`` (``DLV_HOST`` / ``DLV_PORT``).
    DEBUG:
        Flask debug mode (``DLV_DEBUG``).
    LOG_LEVEL:
        Root logging level name (``DLV_LOG_LEVEL``).
    DEFAULT_SPEED:
        Playback speed preset for new sessions (``DLV_DEFAULT_SPEED``).
    MAX_TRACES:
        Recorded runs kept server-side before the least recently used
        one is dropped (``DLV_MAX_TRACES``).
    """

    SECRET_KEY    = os.environ.get("DLV_SECRET_KEY") or secrets.token_hex(32)
    HOST          = os.environ.get("DLV_HOST", "127.0.0.1")
    PORT          = int(os.environ.get("DLV_PORT", "5000"))
    DEBUG         = _env_bool("DLV_DEBUG", False)
    LOG_LEVEL     = os.environ.get("DLV_LOG_LEVEL", "INFO").upper()
    DEFAULT_SPEED = os.environ.get("DLV_DEFAULT_SPEED", "medium")
    MAX_TRACES    = int(os.environ.get("DLV_MAX_TRACES", "256"))

    LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
