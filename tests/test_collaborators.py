import httpx
import pytest

from claims_portal.config import get_settings
from claims_portal.main import app
from claims_portal.providers import LocalStorageProvider, SupabaseStorageProvider, UploadSlotError
from claims_portal.services.address import AddressLookupError, AddressLookupUnavailable, AddressService
from claims_portal.services.enhancement import (
    DescriptionEnhancer,
    EnhancementInputError,
    format_text_fallback,
    get_enhancer,
)
from claims_portal.services.notifications import ClaimNotifier
from claims_portal.services.sms import SmsService, normalize_uk_phone

DESCRIPTION = "the flat roof above the stairwell leaked. water ran down two floors of the communal hallway"


def _transport(status_code=200, json=None, error=None, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        if error is not None:
            raise error
        return httpx.Response(status_code, json=json or {})
    return httpx.MockTransport(handler)


class TestEnhancement:
    def test_fallback_formatting(self):
        assert format_text_fallback("the roof leaked. water came in") == "The roof leaked. Water came in."

    def test_unconfigured_uses_fallback(self):
        result = DescriptionEnhancer(api_key="").enhance(DESCRIPTION)
        assert result.source == "fallback"
        assert result.text.startswith("The flat roof")
        assert result.warning is None

    def test_ai_rewrite(self):
        seen = []
        transport = _transport(json={"choices": [{"message": {"content": "  A clear account.  "}}]}, seen=seen)
        result = DescriptionEnhancer(api_key="sk-test", model="gpt-4o-mini", transport=transport).enhance(DESCRIPTION)
        assert result.source == "ai"
        assert result.text == "A clear account."
        assert seen[0].headers["Authorization"] == "Bearer sk-test"

    def test_rate_limited_falls_back_with_warning(self):
        result = DescriptionEnhancer(api_key="sk-test", transport=_transport(429)).enhance(DESCRIPTION)
        assert result.source == "fallback"
        assert "rate limits" in result.warning

    def test_connection_error_falls_back_with_warning(self):
        transport = _transport(error=httpx.ConnectError("connection refused"))
        result = DescriptionEnhancer(api_key="sk-test", transport=transport).enhance(DESCRIPTION)
        assert result.source == "fallback"
        assert "temporarily unavailable" in result.warning

    def test_server_error_falls_back_quietly(self):
        result = DescriptionEnhancer(api_key="sk-test", transport=_transport(500)).enhance(DESCRIPTION)
        assert result.source == "fallback"
        assert result.warning is None

    def test_short_text_rejected(self):
        with pytest.raises(EnhancementInputError):
            DescriptionEnhancer(api_key="").enhance("   leak   ")


class TestAddressLookup:
    def test_short_query(self):
        with pytest.raises(ValueError):
            AddressService(places_api_key="key").autocomplete("ab")

    def test_unconfigured(self):
        with pytest.raises(AddressLookupUnavailable):
            AddressService(places_api_key="").autocomplete("12 Harbour")
        with pytest.raises(AddressLookupUnavailable):
            AddressService(chimnie_api_key="").construction_details("12 Harbour Court")

    def test_autocomplete_restricted_to_gb(self):
        seen = []
        service = AddressService(places_api_key="key", transport=_transport(json={"predictions": []}, seen=seen))
        assert service.autocomplete(" 12 Harbour ") == {"predictions": []}
        assert seen[0].url.params["components"] == "country:gb"
        assert seen[0].url.params["input"] == "12 Harbour"

    def test_upstream_failure(self):
        service = AddressService(places_api_key="key", transport=_transport(500))
        with pytest.raises(AddressLookupError):
            service.place_details("ChIJ123")


class TestUploadProviders:
    def test_local_slot(self):
        provider = LocalStorageProvider(expires_in=600)
        slot = provider.issue_slot("damage_photos", "kitchen ceiling (1).jpg", "image/jpeg")
        assert slot.object_path.startswith("damage_photos/")
        assert slot.object_path.endswith("/kitchen_ceiling__1_.jpg")
        assert slot.expires_in == 600
        assert provider.issued[slot.object_path] == "image/jpeg"

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            LocalStorageProvider().issue_slot("selfies", "me.jpg", "image/jpeg")

    def test_supabase_signed_url(self):
        seen = []
        transport = _transport(json={"url": "/object/upload/sign/claim-documents/x?token=abc"}, seen=seen)
        provider = SupabaseStorageProvider(
            url="https://proj.supabase.co/", service_role_key="service-key",
            bucket="claim-documents", transport=transport,
        )
        slot = provider.issue_slot("repair_quotes", "quote.pdf", "application/pdf")
        assert slot.upload_url == "https://proj.supabase.co/storage/v1/object/upload/sign/claim-documents/x?token=abc"
        assert slot.object_path.startswith("claim-documents/repair_quotes/")
        assert seen[0].headers["apikey"] == "service-key"

    def test_supabase_failure(self):
        provider = SupabaseStorageProvider(
            url="https://proj.supabase.co", service_role_key="k", bucket="b", transport=_transport(500),
        )
        with pytest.raises(UploadSlotError):
            provider.issue_slot("invoices", "inv.pdf", "application/pdf")


class TestSms:
    @pytest.mark.parametrize("raw,expected", [
        ("07700 900123", "447700900123"),
        ("+44 7700 900123", "447700900123"),
        ("(0117) 496-0123", "441174960123"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_uk_phone(raw) == expected

    def test_unconfigured_send_is_skipped(self):
        assert SmsService.send("07700900123", "hello") is False


class FakeEmail:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def _record(self, kind, claim, *args):
        if self.fail:
            raise RuntimeError("SendGrid unavailable")
        self.sent.append((kind, claim.reference_number) + args)

    def send_claim_confirmation(self, claim):
        self._record("confirmation", claim)

    def send_new_claim_internal(self, claim):
        self._record("internal", claim)

    def send_claim_updated_internal(self, claim, update_type, details):
        self._record("updated", claim, update_type, details)


class FakeSms:
    def __init__(self):
        self.sent = []

    def send(self, to_phone, message):
        self.sent.append((to_phone, message))
        return True


class TestNotifier:
    def test_claim_created(self, submitted_claim, session_factory):
        email, sms = FakeEmail(), FakeSms()
        ClaimNotifier(email, sms, session_factory).claim_created(submitted_claim.id)
        ref = submitted_claim.reference_number
        assert email.sent == [("confirmation", ref), ("internal", ref)]
        assert sms.sent[-1][0] == "07700 900123"
        assert ref in sms.sent[-1][1]

    def test_status_changed(self, submitted_claim, session_factory):
        email, sms = FakeEmail(), FakeSms()
        ClaimNotifier(email, sms, session_factory).status_changed(submitted_claim.id, "submitted", "approved")
        assert email.sent == [(
            "updated", submitted_claim.reference_number, "Status Change", "Changed from submitted to approved",
        )]

    def test_status_changed_texts_claims_team(self, submitted_claim, session_factory, monkeypatch):
        monkeypatch.setattr(get_settings(), "sms_claims_team_phone", "0117 496 0999")
        sms = FakeSms()
        ClaimNotifier(FakeEmail(), sms, session_factory).status_changed(submitted_claim.id, "submitted", "pending")
        ref = submitted_claim.reference_number
        assert sms.sent[0] == (
            "0117 496 0999", f"Claim {ref} updated: Status Change. Changed from submitted to pending",
        )
        assert sms.sent[1][0] == "07700 900123"

    def test_failures_do_not_propagate(self, submitted_claim, session_factory):
        sms = FakeSms()
        ClaimNotifier(FakeEmail(fail=True), sms, session_factory).claim_created(submitted_claim.id)
        assert sms.sent == []

    def test_missing_claim_is_skipped(self, session_factory):
        email = FakeEmail()
        ClaimNotifier(email, FakeSms(), session_factory).claim_created(12345)
        assert email.sent == []


class TestAssistApi:
    def test_upload_slot(self, client):
        response = client.post("/api/uploads/slot", json={
            "category": "damage_photos", "filename": "hall.jpg", "content_type": "image/jpeg",
        })
        assert response.status_code == 200
        body = response.json()
        assert body["object_path"].startswith("damage_photos/")
        assert body["upload_url"]

    def test_upload_slot_bad_category(self, client):
        response = client.post("/api/uploads/slot", json={"category": "selfies", "filename": "me.jpg"})
        assert response.status_code == 400

    def test_enhance_description(self, client):
        app.dependency_overrides[get_enhancer] = lambda: DescriptionEnhancer(api_key="")
        try:
            response = client.post("/api/ai/enhance-description", json={"text": DESCRIPTION})
            assert response.status_code == 200
            assert response.json()["source"] == "fallback"

            response = client.post("/api/ai/enhance-description", json={"text": "short"})
            assert response.status_code == 400
        finally:
            app.dependency_overrides.pop(get_enhancer, None)

    def test_address_lookup_errors(self, client):
        assert client.get("/api/address/autocomplete", params={"input": "ab"}).status_code == 400
