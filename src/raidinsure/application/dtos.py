from dataclasses import dataclass, field
from typing import List

from raidinsure.domain.models.insurance import InsuranceRecord
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.models.profile import PlayerProfile


@dataclass
class ReturnCandidate:
    profile: PlayerProfile
    return_item: ItemSnapshot
    counterparty_id: str
    session_id: str


@dataclass
class RaidExitSummary:
    session_id: str
    returned_item_ids: List[str] = field(default_factory=list)
    records: List[InsuranceRecord] = field(default_factory=list)
    skipped_counterparties: List[str] = field(default_factory=list)
