import json
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import text

from raidinsure.domain.models.insurance import InsuranceRecord
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.models.profile import InsuredItemReference, PlayerProfile, ProfileBonus
from raidinsure.domain.repositories import ProfileRepository


_LOGGER = logging.getLogger(__name__)


def schema_path() -> Path:
    return Path(__file__).resolve().parents[1] / "create_tables.sql"


def apply_schema(engine) -> None:
    sql_text = schema_path().read_text(encoding="utf-8")
    statements = []
    for chunk in sql_text.split(";"):
        lines = [line for line in chunk.splitlines() if not line.strip().startswith("--")]
        statement = "\n".join(lines).strip()
        if statement:
            statements.append(statement)
    with engine.begin() as conn:
        for statement in statements:
            conn.execute(text(statement))


def _loads(raw, default):
    if raw is None or raw == "":
        return default
    if isinstance(raw, (list, dict)):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        _LOGGER.warning("Discarding unreadable JSON column value")
        return default


class SqlProfileRepository(ProfileRepository):
    """Profile store over SQLAlchemy sessions; works against MySQL or SQLite."""

    def __init__(self, session_factory=None) -> None:
        if session_factory is None:
            from .connection import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory

    def get(self, profile_id: str) -> Optional[PlayerProfile]:
        with self._session_factory() as session:
            row = session.execute(
                text(
                    """
                    SELECT profile_id, inventory_root_id, items_json, bonuses_json, loyalty_json
                    FROM player_profile
                    WHERE profile_id = :pid
                    """
                ),
                {"pid": profile_id},
            ).first()
            if row is None:
                return None

            insured_rows = session.execute(
                text(
                    """
                    SELECT item_id, trader_id
                    FROM insured_item
                    WHERE profile_id = :pid
                    ORDER BY position
                    """
                ),
                {"pid": profile_id},
            ).all()
            return_rows = session.execute(
                text(
                    """
                    SELECT trader_id, scheduled_time, message_json, items_json
                    FROM insurance_return
                    WHERE profile_id = :pid
                    ORDER BY position
                    """
                ),
                {"pid": profile_id},
            ).all()

        return PlayerProfile(
            id=str(row.profile_id),
            inventory_root_id=str(row.inventory_root_id),
            items=[ItemSnapshot.from_dict(item) for item in _loads(row.items_json, [])],
            insured_items=[
                InsuredItemReference(item_id=str(r.item_id), counterparty_id=str(r.trader_id)) for r in insured_rows
            ],
            bonuses=[
                ProfileBonus(type=str(bonus.get("type", "")), value=float(bonus.get("value", 0) or 0))
                for bonus in _loads(row.bonuses_json, [])
            ],
            counterparty_loyalty={str(k): int(v) for k, v in _loads(row.loyalty_json, {}).items()},
            pending_returns=[
                InsuranceRecord.from_dict(
                    {
                        "traderId": r.trader_id,
                        "scheduledTime": r.scheduled_time,
                        "messageContent": _loads(r.message_json, {}),
                        "items": _loads(r.items_json, []),
                    }
                )
                for r in return_rows
            ],
        )

    def save(self, profile: PlayerProfile) -> None:
        """Replace the profile row and its insurance children in one transaction."""
        with self._session_factory.begin() as session:
            _upsert_profile_row(session, profile)
            session.execute(text("DELETE FROM insured_item WHERE profile_id = :pid"), {"pid": profile.id})
            for position, ref in enumerate(profile.insured_items):
                session.execute(
                    text(
                        """
                        INSERT INTO insured_item (profile_id, item_id, trader_id, position)
                        VALUES (:pid, :item_id, :trader_id, :position)
                        """
                    ),
                    {"pid": profile.id, "item_id": ref.item_id, "trader_id": ref.counterparty_id, "position": position},
                )
            session.execute(text("DELETE FROM insurance_return WHERE profile_id = :pid"), {"pid": profile.id})
            for position, record in enumerate(profile.pending_returns):
                session.execute(
                    text(
                        """
                        INSERT INTO insurance_return
                            (profile_id, position, trader_id, scheduled_time, message_json, items_json)
                        VALUES (:pid, :position, :trader_id, :scheduled_time, :message_json, :items_json)
                        """
                    ),
                    {
                        "pid": profile.id,
                        "position": position,
                        "trader_id": record.counterparty_id,
                        "scheduled_time": float(record.scheduled_time),
                        "message_json": json.dumps(record.message_content.to_dict()),
                        "items_json": json.dumps([item.to_dict() for item in record.items]),
                    },
                )


def _upsert_profile_row(session, profile: PlayerProfile) -> None:
    dialect = session.get_bind().dialect.name
    if dialect == "mysql":
        statement = text(
            """
            INSERT INTO player_profile (profile_id, inventory_root_id, items_json, bonuses_json, loyalty_json)
            VALUES (:pid, :root, :items_json, :bonuses_json, :loyalty_json)
            ON DUPLICATE KEY UPDATE
                inventory_root_id = VALUES(inventory_root_id),
                items_json = VALUES(items_json),
                bonuses_json = VALUES(bonuses_json),
                loyalty_json = VALUES(loyalty_json)
            """
        )
    else:
        statement = text(
            """
            INSERT INTO player_profile (profile_id, inventory_root_id, items_json, bonuses_json, loyalty_json)
            VALUES (:pid, :root, :items_json, :bonuses_json, :loyalty_json)
            ON CONFLICT(profile_id) DO UPDATE SET
                inventory_root_id = excluded.inventory_root_id,
                items_json = excluded.items_json,
                bonuses_json = excluded.bonuses_json,
                loyalty_json = excluded.loyalty_json
            """
        )
    session.execute(
        statement,
        {
            "pid": profile.id,
            "root": profile.inventory_root_id,
            "items_json": json.dumps([item.to_dict() for item in profile.items]),
            "bonuses_json": json.dumps([{"type": b.type, "value": b.value} for b in profile.bonuses]),
            "loyalty_json": json.dumps(dict(profile.counterparty_loyalty)),
        },
    )
