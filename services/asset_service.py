# services/asset_service.py
from models.attribute import Asset


class AssetDataProvider:
    """Bulk hydration of asset metadata for a set of attribute references."""

    def fetch(self, refs):
        raise NotImplementedError


class InMemoryAssetDataProvider(AssetDataProvider):
    """Serves assets from a dict keyed by asset id. Used by the demo and tests."""

    def __init__(self, assets=None):
        self._assets = {}
        for asset in assets or []:
            self.put(asset)

    def put(self, asset: Asset):
        self._assets[asset.id] = asset

    def fetch(self, refs):
        seen = []
        for ref in refs:
            if ref.asset_id in self._assets and ref.asset_id not in seen:
                seen.append(ref.asset_id)
        return [self._assets[asset_id] for asset_id in seen]
