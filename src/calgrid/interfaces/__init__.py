"""Interfaces (application boundary) for CALGRID.

Defines framework-free contracts for the engine's external collaborators:
the event store, the recurrence-rule evaluator, the timer scheduler used for
edge navigation and the id generator. Business rules stay out of this package.

Dependency rule: modules here may reference `calgrid.domain` value types for
annotations only. They may be imported by `calgrid.domain`,
`calgrid.service_layer`, `calgrid.adapters` and `calgrid.bootstrap`.
"""
