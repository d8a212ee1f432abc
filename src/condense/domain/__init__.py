"""Domain layer: the row model, match specifications and the query algebra.

Nothing in this package performs I/O. Every operation takes whole,
already-materialized tables and returns new ones.
"""
