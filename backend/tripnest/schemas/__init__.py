# Schemas package init
"""
TripNest Backend - Pydantic Schemas
=====================================

API contracts, kept apart from the ORM models in tripnest.models. Field
aliases follow the web client's keys (shortDetail, startDate, ...).
"""
