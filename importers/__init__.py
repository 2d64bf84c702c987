"""Importer package housing order-history CSV ingestion logic."""
