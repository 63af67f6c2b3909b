"""Service layer for CALGRID.

Implements the application use-cases: the commands that write to the event
store and their handlers, the message bus, the preview store and gesture
protocol for interactive edits, view navigation and the live day layouts
consumed by a renderer.

Dependency rule: may import `calgrid.domain` and `calgrid.interfaces`, but not
`calgrid.adapters` or `calgrid.entrypoints`.
"""
