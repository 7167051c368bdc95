"""
governance_health.ingestion — governance data providers.

Modules:
  tally_client    — Tally GraphQL API client (slug resolution, search, listings).
  metrics_builder — pure derivation of ``DAOMetrics`` from a governance record.
"""
