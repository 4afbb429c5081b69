"""Exceptions raised while resolving managed media assets."""
from __future__ import annotations

from typing import Optional


class AssetResolutionError(LookupError):
    """An asset identifier could not be turned into a stored asset."""

    def __init__(self, message: str, asset_id: Optional[int] = None):
        super().__init__(message)
        self.asset_id = asset_id


class AssetNotFoundError(AssetResolutionError):
    def __init__(self, asset_id: int, detail: str = ''):
        message = f'No media asset with id {asset_id}'
        if detail:
            message = f'{message} ({detail})'
        super().__init__(message, asset_id)
