"""
Hierarchy Index
===============

WHAT:
    Precomputed lookups over the campaign → ad set → creative hierarchy so a
    creative id resolves to its ad set and campaign in constant time.

WHY:
    Revenue is recorded against creatives, but the campaign ranking needs it
    rolled up. Building dicts once per computation avoids rescanning the
    ad set and creative lists for every sale.

NOTES:
    - The index is a pure function of its inputs. Rebuild it whenever the
      hierarchy changes; never cache it across edits.
    - Broken links (creative whose ad set was deleted, ad set whose campaign
      was deleted) resolve to None. Lookups never raise.
    - The ad set -> campaign link is checked against the campaign list only
      when validate_campaigns is set. from_snapshot() always sets it, so an
      empty campaign list resolves no campaign at all.

REFERENCES:
    - attribution_engine/services/revenue_attribution.py: campaign roll-up
    - attribution_engine/services/marketing_report.py: builds one index per report
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from attribution_engine.models import AdSet, Campaign, Creative, MarketingSnapshot


class HierarchyIndex:
    """Lookup tables derived from the ad set and creative collections."""

    def __init__(
        self,
        ad_sets: Iterable[AdSet],
        creatives: Iterable[Creative],
        campaigns: Iterable[Campaign] = (),
        validate_campaigns: bool = False,
    ):
        self._campaign_by_ad_set: Dict[str, str] = {}
        self._ad_sets_by_campaign: Dict[str, List[str]] = {}
        self._ad_set_names: Dict[str, str] = {}
        for ad_set in ad_sets:
            self._campaign_by_ad_set[ad_set.id] = ad_set.campaign_id
            self._ad_sets_by_campaign.setdefault(ad_set.campaign_id, []).append(ad_set.id)
            self._ad_set_names[ad_set.id] = ad_set.name

        self._ad_set_by_creative: Dict[str, str] = {}
        self._creatives_by_ad_set: Dict[str, List[str]] = {}
        self._creative_names: Dict[str, str] = {}
        for creative in creatives:
            self._ad_set_by_creative[creative.id] = creative.ad_set_id
            self._creatives_by_ad_set.setdefault(creative.ad_set_id, []).append(creative.id)
            self._creative_names[creative.id] = creative.name

        # With validate_campaigns the campaign list is the full catalogue, even when empty.
        self._campaign_names: Dict[str, str] = {c.id: c.name for c in campaigns}
        self._validate_campaigns = validate_campaigns

    @classmethod
    def from_snapshot(cls, snapshot: MarketingSnapshot) -> "HierarchyIndex":
        """Index a snapshot; its campaign list is authoritative for the top link."""
        return cls(snapshot.ad_sets, snapshot.creatives, snapshot.campaigns, validate_campaigns=True)

    # ------------------------------------------------------------------
    # Upward lookups
    # ------------------------------------------------------------------

    def ad_set_of(self, creative_id: Optional[str]) -> Optional[str]:
        """Ad set id of a creative, or None when the creative is unknown."""
        if not creative_id:
            return None
        return self._ad_set_by_creative.get(creative_id)

    def campaign_of_ad_set(self, ad_set_id: Optional[str]) -> Optional[str]:
        if not ad_set_id:
            return None
        campaign_id = self._campaign_by_ad_set.get(ad_set_id)
        if campaign_id is None:
            return None
        # A campaign id missing from the catalogue counts as unresolved.
        if self._validate_campaigns and campaign_id not in self._campaign_names:
            return None
        return campaign_id

    def campaign_of(self, creative_id: Optional[str]) -> Optional[str]:
        """Campaign id of a creative via its ad set, or None if any link is missing."""
        return self.campaign_of_ad_set(self.ad_set_of(creative_id))

    # ------------------------------------------------------------------
    # Downward lookups
    # ------------------------------------------------------------------

    def ad_sets_of_campaign(self, campaign_id: str) -> List[str]:
        return list(self._ad_sets_by_campaign.get(campaign_id, []))

    def creatives_of_ad_set(self, ad_set_id: str) -> List[str]:
        return list(self._creatives_by_ad_set.get(ad_set_id, []))

    def creatives_of_campaign(self, campaign_id: str) -> List[str]:
        """Creative ids under a campaign, in input order."""
        creative_ids: List[str] = []
        for ad_set_id in self._ad_sets_by_campaign.get(campaign_id, []):
            creative_ids.extend(self._creatives_by_ad_set.get(ad_set_id, []))
        return creative_ids

    def creative_ids(self) -> List[str]:
        return list(self._ad_set_by_creative.keys())

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def creative_name(self, creative_id: str) -> Optional[str]:
        return self._creative_names.get(creative_id)

    def ad_set_name(self, ad_set_id: str) -> Optional[str]:
        return self._ad_set_names.get(ad_set_id)

    def campaign_name(self, campaign_id: str) -> Optional[str]:
        return self._campaign_names.get(campaign_id)


def partition_campaigns(campaigns: Iterable[Campaign]) -> Tuple[List[Campaign], List[Campaign]]:
    """Split campaigns into (active, inactive), keeping input order.

    Campaigns with no status count as active; Paused and Disabled are inactive.
    """
    active: List[Campaign] = []
    inactive: List[Campaign] = []
    for campaign in campaigns:
        if campaign.is_active:
            active.append(campaign)
        else:
            inactive.append(campaign)
    return active, inactive
