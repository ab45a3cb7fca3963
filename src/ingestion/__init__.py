"""
Data ingestion modules for the record transform.

Handles reading raw provider verification records from JSON documents and
structural validation before normalization.
"""
