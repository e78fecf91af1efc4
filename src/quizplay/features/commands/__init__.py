from .loop import CommandLoop, parse_id

__all__ = ["CommandLoop", "parse_id"]
