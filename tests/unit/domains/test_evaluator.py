# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the deadline reminder evaluator."""

from datetime import timedelta
from decimal import Decimal

import pytest

from nodues.domains.reminders import (
    EMAIL_POLICY,
    PUSH_POLICY,
    DeadlineReminderEvaluator,
    ReminderEvaluationError,
    ReminderKind,
)
from nodues.infrastructure.notifications import ChannelType


@pytest.fixture
def evaluator(mock_repository):
    """Evaluator with the default offsets."""
    return DeadlineReminderEvaluator(mock_repository)


class TestFeeDeadlinePush:
    """Fee-structure path on the push channel."""

    @pytest.mark.asyncio
    async def test_reminds_pending_student_with_outstanding_amount(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        """A 3-day deadline yields one push with fee amount minus paid fee."""
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [
            make_fee(run_time, days_to_deadline=3, amount=Decimal("50000"))
        ]
        mock_repository.list_segment_students.return_value = [
            make_student(paid_fee=Decimal("20000"))
        ]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert len(result.candidates) == 1
        candidate = result.candidates[0]
        assert candidate.channel == ChannelType.PUSH
        assert candidate.kind == ReminderKind.FEE_DEADLINE
        assert candidate.days_remaining == 3
        assert candidate.amount == Decimal("30000")
        assert candidate.recipient == "token-asha"
        mock_repository.list_segment_students.assert_awaited_once_with(
            "CSE", "General", status="Pending"
        )

    @pytest.mark.asyncio
    async def test_skips_fully_paid_student(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [
            make_student(paid_fee=Decimal("50000"))
        ]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_skips_student_without_push_token(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [make_student(push_token=None)]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_push_does_not_evaluate_term_end(
        self, evaluator, mock_repository, run_time, make_term
    ):
        """The push job never sends term-end reminders."""
        mock_repository.list_active_terms.return_value = [make_term(run_time, days_to_end=3)]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert result.candidates == []
        mock_repository.list_batch_students.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_push_does_not_query_verified_payments(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [make_student()]

        await evaluator.evaluate(PUSH_POLICY, run_time)

        mock_repository.verified_student_ids.assert_not_awaited()


class TestFeeDeadlineEmail:
    """Fee-structure path on the email channel."""

    @pytest.mark.asyncio
    async def test_reminds_with_fee_amount(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        """Email reminders state the fee structure amount."""
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [
            make_fee(run_time, days_to_deadline=7, amount=Decimal("45000"))
        ]
        mock_repository.list_segment_students.return_value = [
            make_student(paid_fee=Decimal("45000"), status="Paid")
        ]

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert len(result.candidates) == 1
        candidate = result.candidates[0]
        assert candidate.channel == ChannelType.EMAIL
        assert candidate.recipient == "asha@example.com"
        assert candidate.amount == Decimal("45000")
        assert candidate.days_remaining == 7
        assert candidate.fee_name == "Tuition Fee"
        mock_repository.list_segment_students.assert_awaited_once_with(
            "CSE", "General", status=None
        )

    @pytest.mark.asyncio
    async def test_skips_student_with_verified_payment(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [
            make_student(id="stu-1"),
            make_student(id="stu-2", email="ravi@example.com"),
        ]
        mock_repository.verified_student_ids.return_value = {"stu-1"}

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert [c.student_id for c in result.candidates] == ["stu-2"]
        mock_repository.verified_student_ids.assert_awaited_once_with("sem-1")

    @pytest.mark.asyncio
    async def test_skips_student_without_email(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [make_student(email=None)]

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert result.candidates == []


class TestTermEndEmail:
    """Term-end path on the email channel."""

    @pytest.mark.asyncio
    async def test_reminds_batch_students_with_dues(
        self, evaluator, mock_repository, run_time, make_term, make_student
    ):
        """Only students who still owe fees get the term-end email."""
        mock_repository.list_active_terms.return_value = [make_term(run_time, days_to_end=1)]
        mock_repository.list_batch_students.return_value = [
            make_student(id="owes", total_fee=Decimal("50000"), paid_fee=Decimal("30000")),
            make_student(id="cleared", total_fee=Decimal("50000"), paid_fee=Decimal("50000")),
        ]

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert len(result.candidates) == 1
        candidate = result.candidates[0]
        assert candidate.kind == ReminderKind.TERM_END
        assert candidate.student_id == "owes"
        assert candidate.amount == Decimal("20000")
        assert candidate.days_remaining == 1
        mock_repository.list_batch_students.assert_awaited_once_with("2022-2026")

    @pytest.mark.asyncio
    async def test_term_end_outside_offsets(
        self, evaluator, mock_repository, run_time, make_term, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time, days_to_end=5)]
        mock_repository.list_batch_students.return_value = [make_student()]

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert result.candidates == []
        mock_repository.list_batch_students.assert_not_awaited()


class TestOffsets:
    """Reminders fire only on the configured day offsets."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [6, 5, 4, 2, 0, -1, 8])
    async def test_no_reminder_off_schedule(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student, days
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [
            make_fee(run_time, days_to_deadline=days)
        ]
        mock_repository.list_segment_students.return_value = [make_student()]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert result.candidates == []
        mock_repository.list_segment_students.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_day_rounds_up_onto_offset(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        """A deadline 6 days and 2 hours away is a 7-day reminder."""
        fee = make_fee(run_time)
        fee.deadline = run_time + timedelta(days=6, hours=2)
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [fee]
        mock_repository.list_segment_students.return_value = [make_student()]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert [c.days_remaining for c in result.candidates] == [7]

    @pytest.mark.asyncio
    async def test_fee_without_deadline_is_skipped(
        self, evaluator, mock_repository, run_time, make_term, make_fee
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [
            make_fee(run_time, days_to_deadline=None)
        ]

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert result.candidates == []
        assert result.failures == []

    @pytest.mark.asyncio
    async def test_custom_offsets(
        self, mock_repository, run_time, make_term, make_fee, make_student
    ):
        evaluator = DeadlineReminderEvaluator(mock_repository, offsets=[14])
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [
            make_fee(run_time, days_to_deadline=14)
        ]
        mock_repository.list_segment_students.return_value = [make_student()]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert len(result.candidates) == 1


class TestFailureIsolation:
    """A failing unit of work does not stop the others."""

    @pytest.mark.asyncio
    async def test_listing_terms_failure_aborts(self, evaluator, mock_repository, run_time):
        mock_repository.list_active_terms.side_effect = RuntimeError("db down")

        with pytest.raises(ReminderEvaluationError):
            await evaluator.evaluate(EMAIL_POLICY, run_time)

    @pytest.mark.asyncio
    async def test_failed_fee_structure_does_not_stop_others(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [
            make_fee(run_time, id="fee-broken", dept="ECE"),
            make_fee(run_time, id="fee-ok", dept="CSE"),
        ]

        async def segment_students(dept, quota_category, status=None):
            if dept == "ECE":
                raise RuntimeError("query failed")
            return [make_student()]

        mock_repository.list_segment_students.side_effect = segment_students

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert [c.subject_id for c in result.candidates] == ["fee-ok"]
        assert result.failures == ["fee_structure:fee-broken"]

    @pytest.mark.asyncio
    async def test_failed_term_end_still_evaluates_fee_structures(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time, days_to_end=3)]
        mock_repository.list_batch_students.side_effect = RuntimeError("query failed")
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [make_student()]

        result = await evaluator.evaluate(EMAIL_POLICY, run_time)

        assert result.failures == ["term_end:sem-1"]
        assert len(result.candidates) == 1
        assert result.candidates[0].kind == ReminderKind.FEE_DEADLINE

    @pytest.mark.asyncio
    async def test_failed_fee_listing_moves_to_next_term(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [
            make_term(run_time, id="sem-1"),
            make_term(run_time, id="sem-2"),
        ]

        async def fee_structures(term_id):
            if term_id == "sem-1":
                raise RuntimeError("query failed")
            return [make_fee(run_time, semester_id="sem-2")]

        mock_repository.list_fee_structures.side_effect = fee_structures
        mock_repository.list_segment_students.return_value = [make_student()]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        assert result.terms_evaluated == 2
        assert result.failures == ["fee_structures:sem-1"]
        assert [c.term_id for c in result.candidates] == ["sem-2"]


class TestDedupKey:
    """Tests for ReminderCandidate.dedup_key."""

    @pytest.mark.asyncio
    async def test_key_identifies_channel_subject_student_offset_and_date(
        self, evaluator, mock_repository, run_time, make_term, make_fee, make_student
    ):
        mock_repository.list_active_terms.return_value = [make_term(run_time)]
        mock_repository.list_fee_structures.return_value = [make_fee(run_time)]
        mock_repository.list_segment_students.return_value = [make_student()]

        result = await evaluator.evaluate(PUSH_POLICY, run_time)

        key = result.candidates[0].dedup_key(run_time.date())
        assert key == "push:fee_deadline:fee-1:stu-1:3:2025-11-20"
