"""
Service layer for roster.

Query cache plus the list and detail view controllers.
"""
