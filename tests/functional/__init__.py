"""Functional tests.

Purpose
- Validate user-visible behavior at the system boundary (the ``calgrid`` CLI).

Guidelines
- Treat the system as a black box; avoid asserting internal state.
- Prefer realistic event files over mocks.
- One flow/concern per test; check messages/outputs and exit codes.
"""
