"""Takeout organizer: album discovery, asset reconciliation and materialization."""

from .config import OrganizerConfig
from .reconciler import reconcile_assets, AssetEntry, AssetInstance
from .materializer import AssetMaterializer, MaterializationReport
from .workflow import organize, build_asset_map

__all__ = [
    'OrganizerConfig',
    'reconcile_assets',
    'AssetEntry',
    'AssetInstance',
    'AssetMaterializer',
    'MaterializationReport',
    'organize',
    'build_asset_map',
]
