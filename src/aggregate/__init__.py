"""
Profile-level aggregation modules for the record transform.

Derives summary metadata from normalized licenses and taxonomy entries.
"""
