"""Integration tests.

Purpose
- Exercise the engine wired together by `calgrid.bootstrap`: store, message
  bus, recurrence evaluator, preview store, gestures and live calendar.

Guidelines
- Use realistic settings and the sample week fixtures.
- Minimize mocking; drive timers with `ManualScheduler` instead of sleeping.
- Mark as 'integration' and keep them slower but reliable.
"""
