"""
Web interface for the padel league.

Provides a FastAPI application with REST endpoints for players,
the live tournament flow, standings and ratings.
"""
