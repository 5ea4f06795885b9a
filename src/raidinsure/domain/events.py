from dataclasses import dataclass, field
from typing import List

from raidinsure.domain.models.item import ClientInsuredItemData, ItemSnapshot


@dataclass
class RaidExited:
    session_id: str
    profile_id: str
    pre_session_items: List[ItemSnapshot] = field(default_factory=list)
    post_session_items: List[ItemSnapshot] = field(default_factory=list)
    client_insurance: List[ClientInsuredItemData] = field(default_factory=list)
    player_died: bool = False
    location_name: str = ""


@dataclass
class InsuranceReturnScheduled:
    session_id: str
    counterparty_id: str
    scheduled_time: float
    item_count: int


@dataclass
class InsuranceLost:
    session_id: str
    counterparty_id: str
    location_name: str
