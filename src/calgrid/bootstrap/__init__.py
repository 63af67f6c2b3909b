"""Bootstrap (composition root) for CALGRID.

Assembles the engine at runtime: wires the concrete adapters (event store,
recurrence evaluator, scheduler, id generator) to the service layer (message
bus with dependency-injected handlers, preview store, view state, gesture
controller, live calendar) and applies the configured settings.

Import rules:
- Entry points import *this* package (not adapters/service_layer internals).
- This package may import: `calgrid.adapters`, `calgrid.service_layer`,
  `calgrid.interfaces`, `calgrid.domain`, and `calgrid.config`.
- Inner layers must not import `calgrid.bootstrap`.

Public surface:
- Re-export composition factories from this module; keep wiring helpers internal.
- No business rules live here; this is assembly and lifecycle only.
"""

from .bootstrap import AppContainer, bootstrap, build_message_bus, inject_dependencies

__all__ = ["AppContainer", "bootstrap", "build_message_bus", "inject_dependencies"]
