"""
Sender identity shown by the webhook target.
"""
from typing import Optional
from pydantic import BaseModel


class Identity(BaseModel):
    """Username/avatar override for an outbound message. Unset fields use defaults."""
    username: Optional[str] = None
    avatar_url: Optional[str] = None
