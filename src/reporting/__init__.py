"""
Reporting modules for the record transform.
"""
