"""Routing — the fixed endpoint table and the endpoint callback contracts.

Endpoints are registered during setup and compiled into an immutable
lookup structure before the first request.
"""
