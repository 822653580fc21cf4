"""Unit tests for individual components in isolation.

Coverage:
    - models/: Turn and session schemas
    - inference/: Backends, retry policy, client and configuration
    - session/: Session store workflow and invariants

Uses fake clients and mock transports for external services.
"""
