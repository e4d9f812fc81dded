import csv
import io
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional

CSV_COLUMNS = [
    "Reference",
    "Date Submitted",
    "Claimant Name",
    "Email",
    "Phone",
    "Property Address",
    "Incident Type",
    "Incident Date",
    "Status",
]


def _get(claim: Any, name: str) -> Any:
    if isinstance(claim, Mapping):
        return claim.get(name)
    return getattr(claim, name, None)


def _format_datetime(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return value or ""


def _format_date(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    return value or ""


def matches_search(claim: Any, search: Optional[str]) -> bool:
    if not search or not search.strip():
        return True
    needle = search.strip().lower()
    for name in ("reference_number", "claimant_name", "property_address"):
        value = _get(claim, name)
        if value and needle in str(value).lower():
            return True
    return False


def filter_claims(claims: Iterable[Any], search: Optional[str] = None, status: Optional[str] = None) -> List[Any]:
    """Case-insensitive search over reference, claimant name and address, plus a status filter.

    A status of ``None`` or ``"all"`` means no status filter. Input order is preserved.
    """
    return [
        claim for claim in claims
        if matches_search(claim, search)
        and (not status or status == "all" or _get(claim, "status") == status)
    ]


def claims_to_csv(claims: Iterable[Any]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for claim in claims:
        writer.writerow([
            _get(claim, "reference_number") or "",
            _format_datetime(_get(claim, "submitted_at")),
            _get(claim, "claimant_name") or "",
            _get(claim, "claimant_email") or "",
            _get(claim, "claimant_phone") or "",
            _get(claim, "property_address") or "",
            _get(claim, "incident_type") or "",
            _format_date(_get(claim, "incident_date")),
            _get(claim, "status") or "",
        ])
    return buffer.getvalue()


def export_filename(today: date) -> str:
    return f"claims-export-{today.isoformat()}.csv"
