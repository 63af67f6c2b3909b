"""Recurrence evaluator backed by python-dateutil."""

import logging
from datetime import datetime

from dateutil.rrule import rrulestr

from calgrid.interfaces.recurrence import RecurrenceEvaluator, RecurrenceRuleError

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class DateutilRecurrenceEvaluator(RecurrenceEvaluator):
    """Evaluate RFC-5545 rules with `dateutil.rrule.rrulestr`.

    Rules may be given bare (``FREQ=DAILY;COUNT=3``) or with an ``RRULE:``
    prefix. Parsed rules are cached per ``(rule, dtstart)`` pair since the
    same series is expanded on every view change.
    """

    def __init__(self, cache_size: int = 256) -> None:
        self._cache: dict[tuple[str, datetime], object] = {}
        self._cache_size = cache_size

    def between(
        self,
        rule: str,
        dtstart: datetime,
        window_start: datetime,
        window_end: datetime,
    ) -> list[datetime]:
        parsed = self._parse(rule, dtstart)
        try:
            instances = parsed.between(  # type: ignore[attr-defined]
                window_start, window_end, inc=True
            )
        except (ValueError, TypeError, OverflowError) as exc:
            raise RecurrenceRuleError(rule, str(exc)) from exc
        return sorted(dict.fromkeys(instances))

    def _parse(self, rule: str, dtstart: datetime) -> object:
        key = (rule, dtstart)
        if (parsed := self._cache.get(key)) is not None:
            return parsed
        try:
            parsed = rrulestr(rule.strip(), dtstart=dtstart)
        except (ValueError, TypeError, KeyError, IndexError, OverflowError) as exc:
            raise RecurrenceRuleError(rule, str(exc) or type(exc).__name__) from exc
        if len(self._cache) >= self._cache_size:
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = parsed
        logger.debug("Parsed recurrence rule %r (dtstart=%s)", rule, dtstart.isoformat())
        return parsed
