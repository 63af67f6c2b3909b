"""CALGRID test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Shared behavior/invariants enforced across multiple implementations.
- integration/  : Engine components wired together through `bootstrap`.
- functional/   : User-visible flows (CLI sessions) tested at the boundary.
- e2e/          : The CLI entry point's options: logging, verbosity, flight recorder.
- fixtures/     : Shared pytest fixtures, loaded from the root conftest.
- helpers/      : Shared utilities (no tests here).

General guidance
- Keep unit fast and deterministic (no real I/O, no real timers); prefer fakes
  and the ManualScheduler over mocks.
- Functional asserts user-observable results, not internals.
- Contract parametrizes implementations to ensure consistent behavior.
- Property-based tests live with the layer they exercise (hypothesis).
"""
