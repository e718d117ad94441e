"""Routing: the route table that ext routes are registered into.

Host routes are registered during setup, ext duplicates are added at
freeze time, then the table is compiled for matching.
"""
