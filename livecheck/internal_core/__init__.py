from .config import AppConfig, load_config
from .session_store import SessionRegistry

__all__ = ["AppConfig", "load_config", "SessionRegistry"]
