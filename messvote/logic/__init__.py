"""Core business logic layer.

Subpackages:
- voting: voting window rules and the vote engine
- planning: the daily menu plan calendar and votable item resolution
- catalog: menu item curation
- results: vote aggregation and winner resolution
- settings: the process-wide voting window configuration
- students: registration and login lookups
- complaints: facility complaint triage
- reporting: dashboard tallies
"""
__all__ = ["voting", "planning", "catalog", "results", "settings", "students", "complaints", "reporting"]
