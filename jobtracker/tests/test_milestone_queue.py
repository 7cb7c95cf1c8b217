"""
Tests for MilestoneQueue and MilestoneQueueRegistry.
"""
from datetime import datetime, timedelta

from jobtracker.services.milestone_queue import MilestoneQueue, MilestoneQueueRegistry
from jobtracker.services.milestone_service import build_milestone

T0 = datetime(2026, 3, 10, 12, 0, 0)


def milestones(*types):
    return [build_milestone(t, rank="Applicant") for t in types]


class TestMilestoneQueue:
    """Tests for display sequencing"""

    def test_empty_queue_has_nothing_to_show(self):
        queue = MilestoneQueue()
        assert queue.current(T0) is None
        assert len(queue) == 0

    def test_first_pushed_becomes_active(self):
        queue = MilestoneQueue()
        queue.push(milestones("rank_up", "first_application"), T0)

        assert queue.current(T0).type == "rank_up"
        assert [m.type for m in queue.pending()] == ["first_application"]
        assert len(queue) == 2

    def test_push_while_showing_appends_to_backlog(self):
        queue = MilestoneQueue()
        queue.push(milestones("rank_up"), T0)
        queue.push(milestones("first_offer", "five_day_streak"), T0)

        assert queue.current(T0).type == "rank_up"
        assert [m.type for m in queue.pending()] == ["first_offer", "five_day_streak"]

    def test_dismiss_promotes_next(self):
        queue = MilestoneQueue()
        queue.push(milestones("rank_up", "first_offer"), T0)

        assert queue.dismiss(T0).type == "first_offer"
        assert queue.dismiss(T0) is None
        assert len(queue) == 0

    def test_auto_dismiss_after_display_interval(self):
        queue = MilestoneQueue(display_seconds=4)
        queue.push(milestones("rank_up", "first_offer"), T0)

        assert queue.current(T0 + timedelta(seconds=3)).type == "rank_up"
        assert queue.current(T0 + timedelta(seconds=4)).type == "first_offer"
        # The promoted milestone gets its own full interval
        assert queue.current(T0 + timedelta(seconds=7)).type == "first_offer"
        assert queue.current(T0 + timedelta(seconds=8)) is None

    def test_clear(self):
        queue = MilestoneQueue()
        queue.push(milestones("rank_up", "first_offer"), T0)
        queue.clear()

        assert queue.current(T0) is None
        assert queue.pending() == []


class TestMilestoneQueueRegistry:
    """Tests for per-user queues"""

    def test_queues_are_per_user(self):
        registry = MilestoneQueueRegistry()
        registry.get(1).push(milestones("rank_up"), T0)

        assert registry.get(1).current(T0).type == "rank_up"
        assert registry.get(2).current(T0) is None

    def test_same_queue_returned_for_user(self):
        registry = MilestoneQueueRegistry()
        assert registry.get(7) is registry.get(7)

    def test_discard_and_reset(self):
        registry = MilestoneQueueRegistry()
        registry.get(1).push(milestones("rank_up"), T0)
        registry.discard(1)
        assert registry.get(1).current(T0) is None

        registry.get(2).push(milestones("rank_up"), T0)
        registry.reset()
        assert registry.get(2).current(T0) is None
