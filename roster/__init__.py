"""Roster: personnel directory over a hosted document database."""
