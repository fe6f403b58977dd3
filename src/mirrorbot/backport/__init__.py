"""Backport-Spec Codec - Backport configuration stored in milestone descriptions."""

from mirrorbot.backport.codec import decode, encode, parse
from mirrorbot.backport.exceptions import BackportSpecError
from mirrorbot.backport.models import BackportSpec

__all__ = [
    "BackportSpec",
    "BackportSpecError",
    "decode",
    "encode",
    "parse",
]
