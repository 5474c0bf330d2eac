"""
Query layer.

Thin accessors that each execute exactly one SQL statement against the
credential store and return plain row records.
"""
