"""
Provider Record Transform - Provider Verification Record Normalizer

Normalizes heterogeneous provider verification records (licenses, NPI
taxonomy data, exclusions, sanctions lists) into a canonical shape ready
for downstream indexing and retrieval.
"""

__version__ = "1.0.0"
__author__ = "Provider Record Transform Team"
