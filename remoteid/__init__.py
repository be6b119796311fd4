"""Encode, decode and validate Remote ID authentication, message pack and System messages."""

__version__ = "0.1.0"

__all__ = ["auth", "auth_page", "common", "message_pack", "system"]