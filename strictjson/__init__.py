"""Strict JSON reading: positioned, categorised errors, typed parsing and value streams."""

__version__ = "0.1.0"
__all__ = ["de", "error", "numbers", "position", "scanner", "stream"]