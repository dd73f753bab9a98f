"""
"Was this tool helpful?" feedback.

Votes and comments accumulate in a single stored record; a separate flag
remembers that this client has already answered.
"""

from dataclasses import dataclass

from dev_expense_tracker.storage.models import FeedbackRecord
from dev_expense_tracker.storage.repository import LedgerRepository

VOTE_YES = "yes"
VOTE_NO = "no"


@dataclass(frozen=True)
class FeedbackStatus:
    """What the feedback prompt should show."""
    has_voted: bool
    helpful_count: int


def record_vote(repository: LedgerRepository, vote: str) -> FeedbackRecord:
    """Count a yes or no vote.

    An unrecognised vote leaves the stored record unchanged.

    Returns:
        The feedback record after the vote
    """
    feedback = repository.load_feedback()
    if vote not in (VOTE_YES, VOTE_NO):
        return feedback
    feedback = feedback.with_vote(vote == VOTE_YES)
    repository.save_feedback(feedback)
    return feedback


def submit_feedback(repository: LedgerRepository, comment: str = "") -> FeedbackRecord:
    """Store an optional comment and mark this client as having voted.

    Blank comments are not stored.

    Returns:
        The feedback record after submission
    """
    feedback = repository.load_feedback()
    comment = comment.strip() if isinstance(comment, str) else ""
    if comment:
        feedback = feedback.with_comment(comment)
        repository.save_feedback(feedback)
    repository.mark_voted()
    return feedback


def feedback_status(repository: LedgerRepository) -> FeedbackStatus:
    """Whether to show the prompt again, and how many found the tool helpful."""
    return FeedbackStatus(
        has_voted=repository.has_voted(),
        helpful_count=repository.load_feedback().yes,
    )
