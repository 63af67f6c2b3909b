"""Edit flows through the bootstrapped engine: preview, commit, recompute."""

from datetime import date

import pytest

from calgrid.adapters.codec import decode_events
from calgrid.adapters.id_generators import SequentialIdGenerator
from calgrid.adapters.scheduler import ManualScheduler
from calgrid.bootstrap import bootstrap
from calgrid.config import EngineSettings
from calgrid.domain.model import BaseEvent
from calgrid.service_layer import commands
from calgrid.service_layer.gestures import PointerPosition
from calgrid.service_layer.navigation import ViewMode
from tests.helpers.builders import at

# pylint: disable=redefined-outer-name
# pylint: disable=magic-value-comparison

STANDUP = "r1::2025-09-29T09:00:00.000Z"


@pytest.fixture
def scheduler():
    """Clock for edge navigation."""
    return ManualScheduler()


@pytest.fixture
def container(sample_records, scheduler):
    """Engine over the sample week, viewed as the week of 2025-09-29."""
    container = bootstrap(
        EngineSettings(),
        events=decode_events(sample_records),
        anchor=date(2025, 10, 1),
        mode=ViewMode.WEEK,
        scheduler=scheduler,
        id_generator=SequentialIdGenerator(),
    )
    yield container
    container.close()


@pytest.fixture
def notifications(container):
    """Counts calendar notifications."""
    calls = []
    container.calendar.subscribe(lambda: calls.append(1))
    return calls


def px(container, minutes: float) -> float:
    """Pointer offset of `minutes` on the container's grid."""
    return container.settings.grid.minutes_to_pixels(minutes)


def test_drag_previews_then_moves_event(container, notifications):
    """The box follows the pointer; the store changes once on release."""
    calendar, gestures = container.calendar, container.gestures
    gestures.pointer_down_drag(calendar.occurrence("a"), column=1)

    gestures.pointer_move(PointerPosition(y_px=px(container, 720), day_index=1))
    tuesday = calendar.day_layout(1)
    assert tuesday.box("a").previewed
    assert tuesday.box("a").top_px == pytest.approx(px(container, 720))
    assert tuesday.lane_count == 2
    assert container.store.get("a").start == at(2025, 9, 30, 9)

    gestures.pointer_up(PointerPosition(y_px=px(container, 840), day_index=3))

    assert container.store.get("a").start == at(2025, 10, 2, 14)
    thursday = calendar.day_layout(3)
    assert thursday.box("a").segment.start_minutes == 840
    assert not thursday.box("a").previewed
    with pytest.raises(KeyError):
        calendar.day_layout(1).box("a")
    assert len(container.preview) == 0
    # two preview writes, the clear, and the store change
    assert len(notifications) == 4


def test_drag_across_columns_draws_box_in_target_column(container):
    """While dragged to Thursday, the box leaves Tuesday and follows the pointer."""
    calendar, gestures = container.calendar, container.gestures
    gestures.pointer_down_drag(calendar.occurrence("a"), column=1)
    gestures.pointer_move(PointerPosition(y_px=px(container, 660), day_index=3))

    with pytest.raises(KeyError):
        calendar.day_layout(1).box("a")
    box = calendar.day_layout(3).box("a")
    assert box.dragged
    assert box.top_px == pytest.approx(px(container, 660))

    gestures.pointer_cancel()
    assert not calendar.day_layout(1).box("a").previewed


def test_dragging_series_instance_detaches_it(container):
    """Only the dragged instance moves; the rest of the series stays."""
    calendar, gestures = container.calendar, container.gestures
    gestures.pointer_down_drag(calendar.occurrence(STANDUP), column=0)
    detached_id = gestures.pointer_up(
        PointerPosition(y_px=px(container, 660), day_index=0)
    )

    assert detached_id == "r1-2025-09-29T09:00:00.000Z"
    detached = calendar.occurrence(detached_id)
    assert detached.start == at(2025, 9, 29, 11)
    assert detached.source_id is None
    with pytest.raises(KeyError):
        calendar.occurrence(STANDUP)

    container.view.step(1)
    assert calendar.occurrence("r1::2025-10-06T09:00:00.000Z").source_id == "r1"


def test_edge_navigation_moves_event_to_next_week(container, scheduler):
    """Holding the pointer at the right edge pages the view before the drop."""
    calendar, gestures = container.calendar, container.gestures
    gestures.set_container_bounds(0, 700)
    gestures.pointer_down_drag(calendar.occurrence("c"), column=1)
    gestures.pointer_move(PointerPosition(y_px=px(container, 600), x_px=690))

    scheduler.advance(container.settings.edge_interval_s)
    assert container.view.range_start() == date(2025, 10, 6)
    assert calendar.day_layout(1).day == date(2025, 10, 7)

    gestures.pointer_up()
    assert container.store.get("c").start == at(2025, 10, 7, 10)
    assert scheduler.active_timers == 0


def test_selection_creates_event(container):
    """A slot selection becomes a new event with a generated id."""
    gestures = container.gestures
    gestures.pointer_down_select(3, PointerPosition(y_px=px(container, 900)))
    selection = gestures.pointer_up(PointerPosition(y_px=px(container, 990)))

    new_id = container.message_bus.handle(
        commands.CreateEvent(
            BaseEvent(
                id="",
                title="Office hours",
                start=selection.start,
                end=selection.end,
            )
        )
    )

    assert new_id == "evt-0001"
    created = container.calendar.occurrence(new_id)
    assert created.start == at(2025, 10, 2, 15)
    assert created.end == at(2025, 10, 2, 16, 30)


def test_cancelled_drag_leaves_everything_as_is(container):
    """Cancelling restores the stored layout."""
    calendar, gestures = container.calendar, container.gestures
    before = calendar.day_layout(1)
    gestures.pointer_down_resize(calendar.occurrence("b"), column=1)
    gestures.pointer_move(PointerPosition(y_px=px(container, 900)))
    gestures.pointer_cancel()
    assert calendar.day_layout(1) == before
