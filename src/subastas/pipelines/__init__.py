"""
Pipelines Package

The four ingestion stages, run in order by the daily task:
- Discovery: province search → auctions table
- Enrichment: detail views → enrichment fields
- Geocoding: place query → lat/lng
- Export: newest auctions → docs/api/auctions.json
"""
from src.subastas.pipelines.discovery import ListingDiscovery, DiscoveryResult
from src.subastas.pipelines.enrichment import DetailEnrichment, EnrichmentResult
from src.subastas.pipelines.geocoding import AuctionGeocoding, GeocodeResult
from src.subastas.pipelines.export import SnapshotExporter, ExportResult

__all__ = [
    "ListingDiscovery",
    "DiscoveryResult",
    "DetailEnrichment",
    "EnrichmentResult",
    "AuctionGeocoding",
    "GeocodeResult",
    "SnapshotExporter",
    "ExportResult",
]
