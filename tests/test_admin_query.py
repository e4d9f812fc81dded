from datetime import date, datetime

from claims_portal.services.admin_query import (
    CSV_COLUMNS,
    claims_to_csv,
    export_filename,
    filter_claims,
)

CLAIMS = [
    {
        "reference_number": "MEI-LZ3K9Q1A-7F2KQX",
        "submitted_at": datetime(2026, 10, 2, 14, 5, 31),
        "claimant_name": 'Rosa "Ro" Delaney',
        "claimant_email": "rosa.delaney@gmail.com",
        "claimant_phone": "07700 900321",
        "property_address": "Flat 2, 8 Quay Street, Bristol BS1 4DB",
        "incident_type": "escape_of_water",
        "incident_date": date(2026, 9, 30),
        "status": "pending",
    },
    {
        "reference_number": "MEI-LZ3K0001-AB12CD",
        "submitted_at": datetime(2026, 9, 28, 8, 0),
        "claimant_name": "Kwame Mensah",
        "claimant_email": "kwame.mensah@hotmail.co.uk",
        "claimant_phone": "07700 900654",
        "property_address": "3 Redcliffe Parade, Bristol BS1 6SP",
        "incident_type": "storm",
        "incident_date": date(2026, 9, 27),
        "status": "submitted",
    },
]

EXPECTED_CSV = (
    '"Reference","Date Submitted","Claimant Name","Email","Phone","Property Address",'
    '"Incident Type","Incident Date","Status"\n'
    '"MEI-LZ3K9Q1A-7F2KQX","2026-10-02 14:05","Rosa ""Ro"" Delaney","rosa.delaney@gmail.com",'
    '"07700 900321","Flat 2, 8 Quay Street, Bristol BS1 4DB","escape_of_water","2026-09-30","pending"\n'
    '"MEI-LZ3K0001-AB12CD","2026-09-28 08:00","Kwame Mensah","kwame.mensah@hotmail.co.uk",'
    '"07700 900654","3 Redcliffe Parade, Bristol BS1 6SP","storm","2026-09-27","submitted"\n'
)


class TestCsvExport:
    def test_exact_output(self):
        assert claims_to_csv(CLAIMS) == EXPECTED_CSV

    def test_deterministic(self):
        assert claims_to_csv(CLAIMS) == claims_to_csv(list(CLAIMS))

    def test_header_only_when_empty(self):
        assert claims_to_csv([]) == ",".join(f'"{c}"' for c in CSV_COLUMNS) + "\n"

    def test_accepts_orm_claims(self, submitted_claim):
        lines = claims_to_csv([submitted_claim]).splitlines()
        assert len(lines) == 2
        assert lines[1].startswith(f'"{submitted_claim.reference_number}",')
        assert lines[1].endswith('"storm","2026-09-14","submitted"')

    def test_filename(self):
        assert export_filename(date(2026, 10, 18)) == "claims-export-2026-10-18.csv"


class TestFilter:
    def test_search_matches_name_reference_or_address(self):
        assert filter_claims(CLAIMS, search="MENSAH") == [CLAIMS[1]]
        assert filter_claims(CLAIMS, search="ab12cd") == [CLAIMS[1]]
        assert filter_claims(CLAIMS, search="QUAY") == [CLAIMS[0]]

    def test_status(self):
        assert filter_claims(CLAIMS, status="submitted") == [CLAIMS[1]]
        assert filter_claims(CLAIMS, status="all") == CLAIMS
        assert filter_claims(CLAIMS, status="closed") == []

    def test_blank_search_keeps_everything_in_order(self):
        assert filter_claims(CLAIMS, search="  ") == CLAIMS
