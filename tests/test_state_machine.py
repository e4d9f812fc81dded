import pytest
from claims_portal.models.claim import ClaimStatus, CLAIM_STATUS_TRANSITIONS, TERMINAL_STATUSES
from claims_portal.models.payment import PaymentStatus
from claims_portal.state_machine import (
    InvalidStatusTransitionError,
    can_transition,
    get_valid_transitions,
    validate_payment_transition,
    validate_status_transition,
)


class TestStateMachine:
    def test_submitted_can_transition_to_pending(self):
        assert can_transition(ClaimStatus.SUBMITTED, ClaimStatus.PENDING)

    def test_submitted_can_transition_to_approved(self):
        assert can_transition(ClaimStatus.SUBMITTED, ClaimStatus.APPROVED)

    def test_submitted_can_transition_to_rejected(self):
        assert can_transition(ClaimStatus.SUBMITTED, ClaimStatus.REJECTED)

    def test_pending_cannot_go_back_to_submitted(self):
        assert not can_transition(ClaimStatus.PENDING, ClaimStatus.SUBMITTED)

    def test_approved_can_be_reopened(self):
        assert can_transition(ClaimStatus.APPROVED, ClaimStatus.PENDING)

    def test_approved_cannot_flip_to_rejected(self):
        assert not can_transition(ClaimStatus.APPROVED, ClaimStatus.REJECTED)

    def test_rejected_can_be_reopened(self):
        assert can_transition(ClaimStatus.REJECTED, ClaimStatus.PENDING)

    def test_every_open_status_can_close(self):
        for status in ClaimStatus:
            if status not in TERMINAL_STATUSES:
                assert can_transition(status, ClaimStatus.CLOSED)

    def test_closed_is_terminal(self):
        assert ClaimStatus.CLOSED in TERMINAL_STATUSES
        for status in ClaimStatus:
            assert not can_transition(ClaimStatus.CLOSED, status)

    def test_get_valid_transitions_from_submitted(self):
        assert get_valid_transitions(ClaimStatus.SUBMITTED) == {
            ClaimStatus.PENDING, ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.CLOSED,
        }

    def test_get_valid_transitions_from_terminal(self):
        assert len(get_valid_transitions(ClaimStatus.CLOSED)) == 0

    def test_validate_valid_transition(self):
        validate_status_transition(ClaimStatus.PENDING, ClaimStatus.APPROVED)

    def test_validate_invalid_transition_raises(self):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            validate_status_transition(ClaimStatus.APPROVED, ClaimStatus.REJECTED)
        assert "Cannot transition" in str(exc_info.value)
        assert exc_info.value.current_status == "approved"
        assert exc_info.value.target_status == "rejected"
        assert "'closed', 'pending'" in exc_info.value.message

    def test_validate_same_status_raises(self):
        with pytest.raises(InvalidStatusTransitionError):
            validate_status_transition(ClaimStatus.PENDING, ClaimStatus.PENDING)

    def test_validate_from_closed_raises(self):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            validate_status_transition(ClaimStatus.CLOSED, ClaimStatus.PENDING)
        assert "Claim is closed" in exc_info.value.message

    def test_all_statuses_have_transitions_defined(self):
        for status in ClaimStatus:
            assert status in CLAIM_STATUS_TRANSITIONS


class TestPaymentTransitions:
    def test_pending_can_complete(self):
        validate_payment_transition(PaymentStatus.PENDING, PaymentStatus.COMPLETED)

    def test_failed_can_retry(self):
        validate_payment_transition(PaymentStatus.FAILED, PaymentStatus.PENDING)

    @pytest.mark.parametrize("terminal", [PaymentStatus.COMPLETED, PaymentStatus.CANCELLED])
    def test_terminal_payments_stay_put(self, terminal):
        for target in PaymentStatus:
            with pytest.raises(InvalidStatusTransitionError):
                validate_payment_transition(terminal, target)
