"""
Subastas BOE - Core Package

This package contains the ingestion pipeline for Spanish judicial and
administrative real-estate auctions published on the BOE portal, including
discovery, enrichment, geocoding and snapshot export.
"""

__version__ = "0.1.0"
