"""Interface for recurrence-rule evaluation."""

import abc
from datetime import datetime

# pylint: disable=too-few-public-methods


class RecurrenceError(Exception):
    """Base class for recurrence evaluation errors."""


class RecurrenceRuleError(RecurrenceError):
    """Raised when a rule string cannot be parsed or evaluated."""

    def __init__(self, rule: str, reason: str) -> None:
        super().__init__(f"Invalid recurrence rule {rule!r}: {reason}")
        self.rule = rule
        self.reason = reason


class RecurrenceEvaluator(abc.ABC):
    """Contract for an RFC-5545 RRULE evaluator."""

    @abc.abstractmethod
    def between(
        self,
        rule: str,
        dtstart: datetime,
        window_start: datetime,
        window_end: datetime,
    ) -> list[datetime]:
        """Return instance starts of `rule` within a window.

        Args:
            rule: RRULE string, e.g. ``"FREQ=WEEKLY;BYDAY=MO"``.
            dtstart: tz-aware start of the series.
            window_start: tz-aware window start (inclusive).
            window_end: tz-aware window end (inclusive).

        Returns:
            Ordered, de-duplicated tz-aware instance start timestamps.

        Raises:
            RecurrenceRuleError: If the rule cannot be parsed or evaluated.
        """
