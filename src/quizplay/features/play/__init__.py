"""Play feature: session hosting, prompt channels and the HTTP router."""

from .channels import ConsoleChannel, StreamChannel
from .host import SessionHost
from .router import create_play_router

__all__ = [
    "ConsoleChannel",
    "SessionHost",
    "StreamChannel",
    "create_play_router",
]
