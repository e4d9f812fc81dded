"""
Tests for claim payments.

These tests cover:
- Creating settlement / excess / refund payments with an audit entry
- Payment status transitions and paid_at stamping
- Input rejection (non-positive amounts, unknown types)
- The payments API behind staff auth
"""
from claims_portal.models.audit import AuditLog
from claims_portal.models.payment import ClaimPayment
from claims_portal.services.payments import PaymentService
from claims_portal.services.results import WriteStatus


class TestPaymentService:
    def test_create_settlement(self, db, submitted_claim, staff_user):
        result = PaymentService().create_payment(
            db, submitted_claim.id, "settlement", 245000,
            actor_user_id=staff_user.id, recipient_name="Margaret Ellis", payment_method="bacs",
        )
        assert result.ok
        payment = result.value
        assert payment.status == "pending"
        assert payment.currency == "GBP"
        assert payment.paid_at is None

        log = db.query(AuditLog).filter(AuditLog.action == "payment_created").one()
        assert log.entity_type == "payment"
        assert log.changes["amount_pence"] == 245000

    def test_rejects_non_positive_amount(self, db, submitted_claim):
        result = PaymentService().create_payment(db, submitted_claim.id, "excess", 0)
        assert result.status == WriteStatus.INVALID_INPUT
        assert db.query(ClaimPayment).count() == 0

    def test_rejects_unknown_type(self, db, submitted_claim):
        result = PaymentService().create_payment(db, submitted_claim.id, "bonus", 100)
        assert result.status == WriteStatus.INVALID_INPUT

    def test_unknown_claim(self, db):
        assert PaymentService().create_payment(db, 77, "refund", 100).status == WriteStatus.NOT_FOUND

    def test_complete_stamps_paid_at(self, db, submitted_claim):
        service = PaymentService()
        payment = service.create_payment(db, submitted_claim.id, "settlement", 5000).value

        result = service.update_status(db, payment.id, "completed", transaction_reference="BACS-99812")
        assert result.ok
        assert result.value.paid_at is not None
        assert result.value.transaction_reference == "BACS-99812"

    def test_completed_payment_is_final(self, db, submitted_claim):
        service = PaymentService()
        payment = service.create_payment(db, submitted_claim.id, "settlement", 5000).value
        service.update_status(db, payment.id, "completed")

        result = service.update_status(db, payment.id, "cancelled")
        assert result.status == WriteStatus.INVALID_TRANSITION
        db.refresh(payment)
        assert payment.status == "completed"

    def test_failed_payment_can_retry(self, db, submitted_claim):
        service = PaymentService()
        payment = service.create_payment(db, submitted_claim.id, "refund", 1500).value
        assert service.update_status(db, payment.id, "failed").ok
        assert service.update_status(db, payment.id, "pending").ok


class TestPaymentsApi:
    def test_requires_staff(self, client, submitted_claim):
        response = client.get(f"/api/claims/{submitted_claim.id}/payments")
        assert response.status_code == 401

    def test_create_list_and_update(self, client, submitted_claim, staff_headers):
        response = client.post(
            f"/api/claims/{submitted_claim.id}/payments",
            json={"payment_type": "excess", "amount_pence": 25000, "description": "Policy excess"},
            headers=staff_headers,
        )
        assert response.status_code == 201
        payment_id = response.json()["id"]

        listed = client.get(f"/api/claims/{submitted_claim.id}/payments", headers=staff_headers).json()
        assert [p["id"] for p in listed] == [payment_id]

        response = client.patch(
            f"/api/payments/{payment_id}/status", json={"status": "completed"}, headers=staff_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

        response = client.patch(
            f"/api/payments/{payment_id}/status", json={"status": "pending"}, headers=staff_headers,
        )
        assert response.status_code == 400

    def test_negative_amount_is_rejected(self, client, submitted_claim, staff_headers):
        response = client.post(
            f"/api/claims/{submitted_claim.id}/payments",
            json={"payment_type": "refund", "amount_pence": -5},
            headers=staff_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["path"] == "amount_pence"
