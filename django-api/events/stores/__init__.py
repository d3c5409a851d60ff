from events.stores.interfaces import AssetStore, EventStore, Removal

__all__ = ["EventStore", "AssetStore", "Removal"]
