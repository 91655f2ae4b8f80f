"""Column types shared by every model.

Production runs on PostgreSQL (Supabase); the test suite runs on SQLite,
so nothing here may be PostgreSQL-only at the DDL level.
"""
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import UUID as PG_UUID

# Locations, payroll stats, incentive breakdowns
JSONType = JSON

# Native uuid on PostgreSQL, CHAR(32) on SQLite
UUIDType = PG_UUID
