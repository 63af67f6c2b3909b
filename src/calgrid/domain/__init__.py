"""Domain layer for CALGRID.

Contains the calendar rules: event value objects, recurrence expansion,
per-day clamping, lane packing, coordinate/snap math and the pure edit
functions that compute move/resize patches. This package is deliberately
free of UI and persistence concerns.

Dependency rule: do not import from `calgrid.adapters`,
`calgrid.service_layer` or `calgrid.entrypoints`.
"""
