"""
FastAPI REST API for the BOE auction store

Provides REST endpoints for ad-hoc queries against the record store:
- Auction listing
- Manual discovery trigger
- Count and last-run status probe
- Health checks
"""
