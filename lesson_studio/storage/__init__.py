from lesson_studio.storage.assets import LocalAssetStore, StoredAsset, build_asset_store

__all__ = ["LocalAssetStore", "StoredAsset", "build_asset_store"]
