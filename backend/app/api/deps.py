"""
Shared request dependencies
"""
from typing import Optional
from fastapi import Query


class Pagination:
    """``skip``/``take`` query parameters; ``take`` falls back to the per-module default"""

    def __init__(
        self,
        skip: int = Query(0, ge=0),
        take: Optional[int] = Query(None, ge=1, le=500)
    ):
        self.skip = skip
        self.take = take
