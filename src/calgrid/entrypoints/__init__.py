"""Entrypoints (inbound adapters) for CALGRID.

Expose the engine to the outside world; currently the ``calgrid`` command
line. Parse and validate inputs, obtain wired services from
`calgrid.bootstrap`, and present results.

Dependency rule: may import `calgrid.bootstrap` and `calgrid.service_layer`;
avoid importing `calgrid.adapters` directly (the event-file codec is the one
exception, as reading input files is the CLI's job).
"""
