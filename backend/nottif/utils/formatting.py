"""
Formatting utilities for messages and display values.
"""
from typing import List


def truncate_display(message: str, max_length: int) -> str:
    """Cut a message to max_length characters, marking the cut with '...'."""
    if len(message) > max_length:
        return message[:max_length] + "..."
    return message


def split_message(message: str, chunk_size: int) -> List[str]:
    """Split a message into consecutive chunks of at most chunk_size characters.

    An empty message is a single empty chunk.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not message:
        return [message]
    return [message[i:i + chunk_size] for i in range(0, len(message), chunk_size)]
