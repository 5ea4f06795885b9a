"""Command line surface for the insurance pipeline.

Usage examples:
    python -m raidinsure premium --profile profile.json --template 5c0e874186f7745dc7616606 \
        --counterparty 54cb50c76803fa8b248b4571 --prices prices.json
    python -m raidinsure raid-exit --payload raid_exit.json --out profile_after.json
    python -m raidinsure pending --profile profile_after.json
    python -m raidinsure lost-message --session pmc1 --location Laboratory
    python -m raidinsure airdrop --type barter
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from raidinsure.application.dtos import RaidExitSummary
from raidinsure.bootstrap import create_insurance_runtime
from raidinsure.domain.events import RaidExited
from raidinsure.domain.models.airdrop import AirdropType
from raidinsure.domain.models.counterparty import PRAPOR_ID
from raidinsure.domain.models.item import ClientInsuredItemData, ItemSnapshot
from raidinsure.domain.models.profile import PlayerProfile
from raidinsure.infrastructure.inmemory.inmemory_profile_repo import (
    InMemoryItemPriceRepository,
    InMemoryProfileRepository,
)


def _read_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _cmd_premium(args: argparse.Namespace) -> int:
    profile = PlayerProfile.from_dict(_read_json(args.profile))
    prices = _read_json(args.prices) if args.prices else {}
    runtime = create_insurance_runtime(
        profile_repo=InMemoryProfileRepository([profile]),
        price_repo=InMemoryItemPriceRepository(prices),
    )
    item = next((row for row in profile.items if row.template_id == args.template), None)
    if item is None:
        item = ItemSnapshot(id="quote", template_id=args.template)
    quote = runtime.premium_calculator.quote(profile, item, args.counterparty)
    _print_json({"price": quote.value, "warning": quote.gap.describe() if quote.gap else None})
    return 0


def _cmd_raid_exit(args: argparse.Namespace) -> int:
    payload = _read_json(args.payload)
    profile = PlayerProfile.from_dict(payload["profile"])
    runtime = create_insurance_runtime(profile_repo=InMemoryProfileRepository([profile]))
    event = RaidExited(
        session_id=str(payload.get("sessionId") or profile.id),
        profile_id=profile.id,
        pre_session_items=[ItemSnapshot.from_dict(row) for row in payload.get("preRaidItems", [])],
        post_session_items=[ItemSnapshot.from_dict(row) for row in payload.get("postRaidItems", [])],
        client_insurance=[ClientInsuredItemData.from_dict(row) for row in payload.get("insurance", [])],
        player_died=bool(payload.get("playerDied", False)),
        location_name=str(payload.get("location", "")),
    )
    report = runtime.event_bus.publish(event)
    summary = report.value_of(RaidExitSummary) or RaidExitSummary(session_id=event.session_id)
    _print_json(
        {
            "returnedItemIds": summary.returned_item_ids,
            "records": [record.to_dict() for record in summary.records],
            "skippedCounterparties": summary.skipped_counterparties,
        }
    )
    if args.out:
        updated = runtime.profile_repo.get(profile.id)
        Path(args.out).write_text(json.dumps(updated.to_dict(), indent=2), encoding="utf-8")
    return 0


def _cmd_pending(args: argparse.Namespace) -> int:
    if args.profile:
        profile = PlayerProfile.from_dict(_read_json(args.profile))
        runtime = create_insurance_runtime(profile_repo=InMemoryProfileRepository([profile]))
        player_id = profile.id
    elif args.player:
        runtime = create_insurance_runtime()
        player_id = args.player
    else:
        print("pending needs --profile or --player", file=sys.stderr)
        return 2
    records = runtime.profile_repo.list_pending_returns(player_id)
    _print_json([record.to_dict() for record in records])
    return 0


def _cmd_lost_message(args: argparse.Namespace) -> int:
    runtime = create_insurance_runtime(profile_repo=InMemoryProfileRepository())
    outcome = runtime.dispatcher.send_lost_insurance_message(args.session, args.location, args.counterparty)
    if not outcome.ok:
        print(outcome.gap.describe(), file=sys.stderr)
        return 1
    _print_json(outcome.value.to_dict())
    return 0


def _cmd_airdrop(args: argparse.Namespace) -> int:
    runtime = create_insurance_runtime(profile_repo=InMemoryProfileRepository())
    airdrop_type = AirdropType(args.type) if args.type else None
    result = runtime.airdrop_service.get_airdrop_loot(airdrop_type)
    _print_json({"dropType": result.drop_type.value, "loot": [item.to_dict() for item in result.loot]})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="raidinsure", description="Insurance return pipeline tools")
    commands = parser.add_subparsers(dest="command", required=True)

    premium = commands.add_parser("premium", help="Quote the insurance price of one item")
    premium.add_argument("--profile", required=True)
    premium.add_argument("--template", required=True)
    premium.add_argument("--counterparty", default=PRAPOR_ID)
    premium.add_argument("--prices", default=None, help="JSON mapping of template id to base price")
    premium.set_defaults(handler=_cmd_premium)

    raid_exit = commands.add_parser("raid-exit", help="Resolve lost insured gear from a raid exit payload")
    raid_exit.add_argument("--payload", required=True)
    raid_exit.add_argument("--out", default=None, help="Write the updated profile here")
    raid_exit.set_defaults(handler=_cmd_raid_exit)

    pending = commands.add_parser("pending", help="List pending insurance returns")
    pending.add_argument("--profile", default=None)
    pending.add_argument("--player", default=None)
    pending.set_defaults(handler=_cmd_pending)

    lost = commands.add_parser("lost-message", help="Send the insurance-failed message")
    lost.add_argument("--session", required=True)
    lost.add_argument("--location", default="")
    lost.add_argument("--counterparty", default=PRAPOR_ID)
    lost.set_defaults(handler=_cmd_lost_message)

    airdrop = commands.add_parser("airdrop", help="Generate the loot of one airdrop")
    airdrop.add_argument("--type", default=None, choices=[kind.value for kind in AirdropType])
    airdrop.set_defaults(handler=_cmd_airdrop)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return int(args.handler(args))
