from democrat.drucksache.models import Category, Drucksache, RegistryPage, SyncResult
from democrat.drucksache.registry import DIPRegistryClient, drucksache_from_record
from democrat.drucksache.repository import DrucksacheRepository, InMemoryDrucksacheRepository
from democrat.drucksache.sync import RegistrySyncEngine

__all__ = [
    "Category",
    "Drucksache",
    "RegistryPage",
    "SyncResult",
    "DIPRegistryClient",
    "drucksache_from_record",
    "DrucksacheRepository",
    "InMemoryDrucksacheRepository",
    "RegistrySyncEngine",
]
