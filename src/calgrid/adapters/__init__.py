"""Adapters (infrastructure) for CALGRID.

Provide concrete implementations of the interfaces: an in-memory event store,
the python-dateutil recurrence evaluator, timer schedulers, id generators and
the JSON event codec used by the CLI.

Dependency rule: may import `calgrid.domain` and `calgrid.interfaces`; the
domain must not import this package.
"""
