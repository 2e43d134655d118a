# apps/campaigns/services.py
import logging
from decimal import Decimal

from apps.core.api import ApiClient, ApiError

from .placeholders import find_placeholder, placeholder_campaigns
from .records import Campaign, CampaignSummary, DonationSummary, parse_campaign_listing

logger = logging.getLogger(__name__)


def placeholder_summary(campaigns) -> CampaignSummary:
    return CampaignSummary(
        total_campaigns=len(campaigns),
        total_collected=sum((c.total_collected for c in campaigns), Decimal("0")),
        total_transactions=0,
    )


def fetch_campaigns(client: ApiClient) -> tuple[list[Campaign], CampaignSummary]:
    """Campaign list and the backend totals; raises ``ApiError``."""
    return parse_campaign_listing(client.get("/campaigns"))


def load_campaigns(client: ApiClient) -> tuple[list[Campaign], CampaignSummary, bool]:
    """
    Like ``fetch_campaigns`` but never fails: an error or an empty list
    yields the placeholder campaigns. The last item tells which happened.
    """
    try:
        campaigns, summary = fetch_campaigns(client)
    except ApiError as exc:
        logger.warning("Campaign list unavailable, using placeholders: %s", exc)
        campaigns, summary = [], None
    if campaigns:
        return campaigns, summary, False
    campaigns = placeholder_campaigns()
    return campaigns, placeholder_summary(campaigns), True


def load_campaign(client: ApiClient, campaign_id: int):
    """A single campaign, its placeholder twin on failure, or None."""
    try:
        data = client.get(f"/campaigns/{campaign_id}")
    except ApiError as exc:
        logger.warning("Campaign %s unavailable: %s", campaign_id, exc)
        return find_placeholder(campaign_id)
    if isinstance(data, dict) and isinstance(data.get("campaign"), dict):
        data = data["campaign"]
    if not data:
        return find_placeholder(campaign_id)
    return Campaign.from_api(data)


def fetch_donation_summary(client: ApiClient):
    try:
        data = client.get("/donations/summary")
    except ApiError as exc:
        logger.info("Donation summary unavailable: %s", exc)
        return None
    return DonationSummary.from_api(data) if isinstance(data, dict) else None
