"""
Utility modules for Nottif.
"""
from nottif.utils.logger import setup_logger
from nottif.utils.formatting import truncate_display, split_message
from nottif.utils.locks import AsyncReadWriteLock

__all__ = [
    "setup_logger",
    "truncate_display",
    "split_message",
    "AsyncReadWriteLock",
]
