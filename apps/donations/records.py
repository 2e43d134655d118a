from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from apps.core.formatting import parse_api_datetime, to_decimal, to_int


@dataclass
class Donation:
    id: Optional[int] = None
    amount: Decimal = Decimal("0")
    user_id: Optional[int] = None
    user_name: str = ""
    campaign_id: Optional[int] = None
    campaign_title: str = ""
    status_payment: str = ""
    payment_method: str = ""
    payment_url: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "Donation":
        data = data or {}
        user = data.get("user") if isinstance(data.get("user"), dict) else {}
        campaign = data.get("campaign")
        if isinstance(campaign, dict):
            campaign_title = campaign.get("title") or ""
        else:
            campaign_title, campaign = campaign or "", {}
        user_name = data.get("user_name") or user.get("name") or " ".join(
            part for part in (user.get("first_name"), user.get("last_name")) if part
        )
        return cls(
            id=to_int(data.get("id")),
            amount=to_decimal(data.get("amount")),
            user_id=to_int(data.get("user_id") or user.get("id")),
            user_name=user_name,
            campaign_id=to_int(data.get("campaign_id") or campaign.get("id")),
            campaign_title=campaign_title or data.get("campaign_title") or "",
            status_payment=data.get("status_payment") or data.get("status") or "",
            payment_method=data.get("payment_method") or "",
            payment_url=data.get("payment_url") or "",
            created_at=parse_api_datetime(data.get("created_at") or data.get("date")),
        )

    @property
    def redirects_to_gateway(self) -> bool:
        """``payment_url`` is either an absolute checkout URL or a Snap token."""
        return self.payment_url.startswith("http")


def parse_donations(data) -> list[Donation]:
    if isinstance(data, dict):
        data = data.get("donations") or []
    return [Donation.from_api(item) for item in data or [] if isinstance(item, dict)]


def parse_created_donation(data) -> Donation:
    """``POST /donations`` answers ``{"donation": {...}, "payment_url": ...}``."""
    if not isinstance(data, dict):
        return Donation()
    if isinstance(data.get("donation"), dict):
        donation = Donation.from_api(data["donation"])
        donation.payment_url = data.get("payment_url") or donation.payment_url
        return donation
    return Donation.from_api(data)
