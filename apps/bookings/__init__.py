"""Bookings app package.

This app encapsulates the booking domain: the booking model, the
conflict-checked booking workflow and the periodic completion task.
Overlapping active stays are rejected under a row lock on the property
and, on PostgreSQL, by an exclusion constraint.
"""
