"""
Shared Kernel

Framework-free domain code shared by the Django apps: value objects and the
access policy for bookings and properties.
"""
