import pytest

from claims_portal import ClaimValidationError, FormSession, SubmissionRejected, assemble_submission, validate_submission

STEP_ANSWERS = {
    1: {
        "claimant_name": "Margaret Ellis",
        "claimant_email": "margaret.ellis@gmail.com",
        "claimant_phone": "07700 900123",
    },
    2: {"property_address": "Flat 4, 12 Harbour Court, Bristol BS1 5TY"},
    3: {
        "incident_date": "2026-09-14",
        "incident_type": "theft_or_attempted_theft",
        "incident_description": "The communal entrance door was forced overnight and the bike store emptied.",
    },
    4: {"has_building_damage": False},
    5: {
        "has_theft": True,
        "theft_description": "Six bicycles taken from the locked communal store",
        "theft_police_reported": True,
        "theft_police_reference": "CAD-4471-26",
    },
    6: {"is_investment_property": False},
    7: {"police_reports": ["police_reports/f1/crime-report.pdf"]},
    8: {
        "signature_data": "Margaret Ellis signed",
        "signature_type": "typed",
        "declaration_accepted": True,
        "fraud_warning_accepted": True,
        "contents_exclusion_accepted": True,
    },
}


def _walk(session, upto=8):
    for step in range(1, upto + 1):
        session.advance(STEP_ANSWERS[step])
    return session


class TestNavigation:
    def test_starts_on_first_step(self):
        session = FormSession()
        assert session.step == 1
        assert session.retreat() == 1

    def test_advance_moves_forward_and_keeps_answers(self):
        session = FormSession()
        assert session.advance(STEP_ANSWERS[1]) == 2
        assert session.answers["claimant_name"] == "Margaret Ellis"

    def test_invalid_step_does_not_advance(self):
        session = FormSession()
        with pytest.raises(ClaimValidationError):
            session.advance({"claimant_name": "M"})
        assert session.step == 1
        assert session.answers == {}

    def test_retreat_keeps_answers(self):
        session = _walk(FormSession(), upto=3)
        assert session.step == 4
        session.retreat()
        session.retreat()
        assert session.step == 2
        assert session.current_answers()["property_address"] == STEP_ANSWERS[2]["property_address"]
        assert session.answers["incident_type"] == "theft_or_attempted_theft"

    def test_step_is_clamped(self):
        session = _walk(FormSession())
        assert session.step == 8
        assert session.is_last_step
        assert session.go_to(42) == 8
        assert session.go_to(-3) == 1

    def test_later_step_sees_earlier_gate(self):
        session = _walk(FormSession(), upto=6)
        with pytest.raises(ClaimValidationError) as exc_info:
            session.advance({})
        assert exc_info.value.paths == ["police_reports"]
        assert session.step == 7


class TestSubmit:
    def test_walked_session_submits(self):
        payload = _walk(FormSession()).submit()
        validate_submission(payload)
        assert payload["has_theft"] is True
        assert payload["theft_police_reference"] == "CAD-4471-26"
        assert payload["damage_photos"] == []
        assert payload["building_damage_description"] == ""

    def test_changed_earlier_answer_sends_back_to_owning_step(self):
        session = _walk(FormSession())
        session.go_to(4)
        session.advance({"has_building_damage": True, "building_damage_description": "Door frame split and lock smashed"})
        session.go_to(8)
        with pytest.raises(SubmissionRejected) as exc_info:
            session.submit()
        assert exc_info.value.step == 7
        assert set(exc_info.value.paths) == {"damage_photos", "repair_quotes"}
        assert session.step == 7


class TestAssembler:
    def test_unanswered_flags_default_to_no(self):
        answers = {k: v for step in (1, 2, 3, 8) for k, v in STEP_ANSWERS[step].items()}
        payload = assemble_submission(answers)
        assert payload["has_building_damage"] is False
        assert payload["has_theft"] is False
        assert payload["theft_police_reported"] is False
        assert payload["is_investment_property"] is False
        for name in ("damage_photos", "repair_quotes", "invoices", "police_reports",
                     "other_documents", "tenancy_agreements"):
            assert payload[name] == []

    def test_stale_text_from_a_no_answer_is_blanked(self):
        answers = {k: v for step in STEP_ANSWERS for k, v in STEP_ANSWERS[step].items()}
        answers.update({
            "has_theft": False,
            "tenant_name": "Left over from an earlier yes",
            "building_damage_description": "Also stale",
        })
        payload = assemble_submission(answers)
        assert payload["theft_description"] == ""
        assert payload["theft_police_reported"] is False
        assert payload["theft_police_reference"] == ""
        assert payload["tenant_name"] == ""
        assert payload["building_damage_description"] == ""

    def test_missing_required_field_names_its_step(self):
        answers = {k: v for step in STEP_ANSWERS for k, v in STEP_ANSWERS[step].items()}
        del answers["property_address"]
        with pytest.raises(SubmissionRejected) as exc_info:
            assemble_submission(answers)
        assert exc_info.value.step == 2

    @pytest.mark.parametrize("value", ["yes", "true", 1])
    def test_non_boolean_flag_is_rejected_not_defaulted(self, value):
        answers = {k: v for step in STEP_ANSWERS for k, v in STEP_ANSWERS[step].items()}
        answers["has_building_damage"] = value
        with pytest.raises(SubmissionRejected) as exc_info:
            assemble_submission(answers)
        assert exc_info.value.step == 4
        assert "has_building_damage" in exc_info.value.paths

    def test_non_boolean_police_flag_is_rejected_without_theft(self):
        answers = {k: v for step in STEP_ANSWERS for k, v in STEP_ANSWERS[step].items()}
        answers.update({"has_theft": False, "theft_police_reported": "no"})
        with pytest.raises(SubmissionRejected) as exc_info:
            assemble_submission(answers)
        assert exc_info.value.paths == ["theft_police_reported"]
