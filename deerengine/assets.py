"""Assets loaded from disk, each identified by a small integer id."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

Loader = Callable[[str], Any]


@dataclass
class Asset:
    """A loaded resource: its id, where it came from, and the loaded value."""

    asset_id: int = 0
    location: Path = field(default_factory=lambda: Path("null"))
    value: Any = None


class AssetManager:
    """Registry of assets; id 0 is a placeholder meaning "no asset"."""

    def __init__(self) -> None:
        self._assets: list[Asset] = [Asset()]

    def get_asset(self, asset_id: int) -> Asset:
        """The asset with the given id."""
        if not 0 <= asset_id < len(self._assets):
            raise IndexError(f"no asset with id {asset_id}")
        return self._assets[asset_id]

    def asset_location(self, asset_id: int) -> Path:
        """Where the asset with the given id was loaded from."""
        return self.get_asset(asset_id).location

    def load_asset(self, location, loader: Optional[Loader] = None) -> int:
        """Id of the asset at location, loading it first if it is new.

        The loader receives the location with forward slashes and returns
        the asset's value; without a loader the value stays None.
        """
        path = Path(location)
        for asset in self._assets:
            if asset.location == path:
                return asset.asset_id
        asset_id = len(self._assets)
        value = loader(path.as_posix()) if loader is not None else None
        self._assets.append(Asset(asset_id, path, value))
        return asset_id

    def __len__(self) -> int:
        return len(self._assets)