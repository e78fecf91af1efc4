"""Line-oriented trivia quiz tool with a session-scoped play engine."""

from __future__ import annotations

__all__: list[str] = []
