"""Business logic layer for identity app.

Registration, authentication and lookup of principals. Uniqueness is
enforced by the database at insert time, not by a prior lookup.
"""
