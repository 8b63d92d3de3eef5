from .engine import analyze

__all__ = ["analyze"]
