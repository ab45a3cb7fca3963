"""
Pipeline orchestration for the record transform.

Assembles canonical records and runs the load, validate, transform and
write stages from the command line.
"""
