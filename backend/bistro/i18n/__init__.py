from .loader import DEFAULT_LANG, t

__all__ = ["DEFAULT_LANG", "t"]
