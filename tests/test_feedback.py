"""
Unit tests for the feedback prompt and analytics tracker.
"""

import pytest

from dev_expense_tracker.analytics.tracker import AnalyticsEvent, AnalyticsTracker, disabled_tracker
from dev_expense_tracker.core.feedback import feedback_status, record_vote, submit_feedback
from dev_expense_tracker.storage.kv_store import InMemoryKeyValueStore
from dev_expense_tracker.storage.models import FeedbackRecord
from dev_expense_tracker.storage.repository import LedgerRepository


@pytest.fixture
def repository():
    return LedgerRepository(InMemoryKeyValueStore())


class TestFeedback:
    """Test votes, comments and the voted flag."""

    def test_votes_accumulate(self, repository):
        """Verify yes and no votes are counted."""
        record_vote(repository, "yes")
        record_vote(repository, "yes")
        record = record_vote(repository, "no")
        assert record == FeedbackRecord(yes=2, no=1, comments=[])
        assert repository.load_feedback() == record

    def test_invalid_vote_ignored(self, repository):
        """Verify unknown votes change nothing."""
        record_vote(repository, "yes")
        assert record_vote(repository, "maybe") == FeedbackRecord(yes=1)

    def test_vote_does_not_mark_voted(self, repository):
        """Verify only submission sets the voted flag."""
        record_vote(repository, "yes")
        assert repository.has_voted() is False

    def test_submit_appends_comment_and_marks_voted(self, repository):
        """Verify comments are trimmed, appended and the flag set."""
        submit_feedback(repository, "  more charts please ")
        record = submit_feedback(repository, "dark mode")
        assert record.comments == ["more charts please", "dark mode"]
        assert repository.has_voted() is True

    def test_blank_comment_not_stored(self, repository):
        """Verify blank comments are dropped but still mark voted."""
        submit_feedback(repository, "   ")
        assert repository.load_feedback().comments == []
        assert repository.has_voted() is True

    def test_status(self, repository):
        """Verify status reports the voted flag and helpful count."""
        assert feedback_status(repository).has_voted is False
        record_vote(repository, "yes")
        submit_feedback(repository)
        status = feedback_status(repository)
        assert status.has_voted is True
        assert status.helpful_count == 1

    def test_record_is_not_mutated(self):
        """Verify updates return new records."""
        original = FeedbackRecord()
        original.with_vote(True)
        original.with_comment("hi")
        assert original == FeedbackRecord(yes=0, no=0, comments=[])


class TestAnalyticsTracker:
    """Test best-effort event emission."""

    def test_events_reach_sink(self):
        """Verify action and label are passed on."""
        events = []
        AnalyticsTracker(events.append).track("cta_click", "try_it_now")
        assert events == [AnalyticsEvent(action="cta_click", label="try_it_now", category="engagement")]

    def test_disabled_tracker_drops_events(self):
        """Verify a tracker without a sink does nothing."""
        disabled_tracker().track("csv_exported")

    def test_sink_errors_are_swallowed(self):
        """Verify failing sinks never raise to the caller."""
        def broken(event):
            raise ConnectionError("offline")

        AnalyticsTracker(broken).track("subscription_added")

    def test_default_sink_logs(self):
        """Verify the default sink accepts events."""
        AnalyticsTracker().track("subscription_added")
