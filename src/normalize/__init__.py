"""
Data normalization modules for the record transform.

Handles field-name canonicalization, license jurisdiction and board action
normalization, and NPI taxonomy code parsing.
"""
