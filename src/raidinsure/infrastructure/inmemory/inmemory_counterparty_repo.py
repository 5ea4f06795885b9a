from __future__ import annotations

from typing import Dict, List, Optional

from raidinsure.domain.models.counterparty import (
    PRAPOR_ID,
    THERAPIST_ID,
    Counterparty,
    DialogueTemplates,
    InsuranceTerms,
    LoyaltyLevel,
)
from raidinsure.domain.repositories import CounterpartyRepository


class InMemoryCounterpartyRepository(CounterpartyRepository):
    def __init__(self, counterparties: Dict[str, Counterparty] | None = None) -> None:
        if counterparties is not None:
            self._counterparties = dict(counterparties)
            return
        self._counterparties: Dict[str, Counterparty] = {
            PRAPOR_ID: Counterparty(
                id=PRAPOR_ID,
                name="Prapor",
                insurance=InsuranceTerms(min_return_hours=24, max_return_hours=36, max_storage_time=96),
                loyalty_levels=[
                    LoyaltyLevel(min_level=1, insurance_price_coef=0),
                    LoyaltyLevel(min_level=15, insurance_price_coef=8),
                    LoyaltyLevel(min_level=26, insurance_price_coef=14),
                    LoyaltyLevel(min_level=36, insurance_price_coef=20),
                ],
                dialogue=DialogueTemplates(
                    insurance_start=["5a8fd75188a45036844e0ae8", "5a8fd75188a45036844e0b0c"],
                    insurance_found=["5a8fd75188a45036844e0b06", "5a8fd75188a45036844e0b08"],
                    insurance_failed=["5a8fd75188a45036844e0b14", "5a8fd75188a45036844e0b18"],
                    insurance_failed_labs=["5a8fd75188a45036844e0b1f"],
                ),
            ),
            THERAPIST_ID: Counterparty(
                id=THERAPIST_ID,
                name="Therapist",
                insurance=InsuranceTerms(min_return_hours=12, max_return_hours=24, max_storage_time=144),
                loyalty_levels=[
                    LoyaltyLevel(min_level=1, insurance_price_coef=0),
                    LoyaltyLevel(min_level=13, insurance_price_coef=10),
                    LoyaltyLevel(min_level=24, insurance_price_coef=15),
                    LoyaltyLevel(min_level=35, insurance_price_coef=25),
                ],
                dialogue=DialogueTemplates(
                    insurance_start=["59c7a7df86f7747c8f53e4f9", "59c7a7df86f7747c8f53e4fb"],
                    insurance_found=["59c7a7df86f7747c8f53e501", "59c7a7df86f7747c8f53e503"],
                    insurance_failed=["59c7a7df86f7747c8f53e507"],
                    insurance_failed_labs=["59c7a7df86f7747c8f53e50b"],
                ),
            ),
        }

    def get(self, counterparty_id: str) -> Optional[Counterparty]:
        return self._counterparties.get(counterparty_id)

    def list_all(self) -> List[Counterparty]:
        return list(self._counterparties.values())