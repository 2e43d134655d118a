import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from apps.core.formatting import parse_api_datetime, to_decimal, to_int

STATUS_LABELS = {
    "active": "Aktif",
    "completed": "Selesai",
    "inactive": "Nonaktif",
}


@dataclass
class Campaign:
    id: Optional[int] = None
    title: str = ""
    description: str = ""
    details: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    target_total: Decimal = Decimal("0")
    total_collected: Decimal = Decimal("0")
    category: str = ""
    location: str = ""
    cpocket: str = ""
    status: str = "active"
    photo: str = ""
    user_id: Optional[int] = None
    user_name: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "Campaign":
        data = data or {}
        user = data.get("user") if isinstance(data.get("user"), dict) else {}
        user_name = data.get("user_name") or " ".join(
            part for part in (user.get("first_name"), user.get("last_name")) if part
        )
        return cls(
            id=to_int(data.get("id") or data.get("_id")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            details=data.get("details") or "",
            start=parse_api_datetime(data.get("start")),
            end=parse_api_datetime(data.get("end")),
            target_total=to_decimal(data.get("target_total")),
            total_collected=to_decimal(data.get("total_collected", data.get("totalCollected"))),
            category=data.get("category") or "",
            location=data.get("location") or "",
            cpocket=data.get("cpocket") or "",
            status=(data.get("status") or "active").lower(),
            photo=data.get("photo") or data.get("image") or "",
            user_id=to_int(data.get("user_id") or user.get("id")),
            user_name=user_name,
            created_at=parse_api_datetime(data.get("created_at")),
        )

    @property
    def progress_percent(self) -> float:
        if self.target_total <= 0:
            return 0.0
        return float(min(Decimal("100"), self.total_collected / self.target_total * 100))

    @property
    def days_left(self) -> int:
        if not self.end:
            return 0
        seconds = (self.end - timezone.now()).total_seconds()
        return max(math.ceil(seconds / 86400), 0)

    @property
    def status_label(self) -> str:
        return STATUS_LABELS.get(self.status, "Nonaktif")


@dataclass
class CampaignSummary:
    total_campaigns: int = 0
    total_collected: Decimal = Decimal("0")
    total_transactions: int = 0


def parse_campaign_listing(data) -> tuple[list[Campaign], CampaignSummary]:
    """``GET /campaigns`` returns the list together with the backend's own totals."""
    if isinstance(data, list):
        campaigns = [Campaign.from_api(item) for item in data]
        return campaigns, CampaignSummary(total_campaigns=len(campaigns))
    data = data or {}
    campaigns = [Campaign.from_api(item) for item in data.get("campaigns") or []]
    summary = CampaignSummary(
        total_campaigns=to_int(data.get("total_campaigns")) or 0,
        total_collected=to_decimal(data.get("total_collected")),
        total_transactions=to_int(data.get("total_transactions")) or 0,
    )
    return campaigns, summary


@dataclass
class DonationSummary:
    total_transactions: int = 0
    total_amount: Decimal = Decimal("0")

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "DonationSummary":
        data = data or {}
        return cls(
            total_transactions=to_int(data.get("total_transactions")) or 0,
            total_amount=to_decimal(data.get("total_amount")),
        )
