"""Core app package.

Cross-cutting API plumbing shared by the domain apps: the JSON error
envelope, the health probe, pagination and the adapter between DRF
permissions and the access policy in ``shared.domain.policy``.
"""
