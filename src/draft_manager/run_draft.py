"""Run a draft locally from the command line.

Usage:
    python -m src.draft_manager.run_draft new "League" "Team A,Team B" [--rounds N] [--seed S]
    python -m src.draft_manager.run_draft list
    python -m src.draft_manager.run_draft status <draft_id>
    python -m src.draft_manager.run_draft available <draft_id> --catalog players.json
    python -m src.draft_manager.run_draft pick <draft_id> <player_id> --catalog players.json
    python -m src.draft_manager.run_draft board <draft_id>
    python -m src.draft_manager.run_draft roster <draft_id> "Team A"
    python -m src.draft_manager.run_draft standings <draft_id>
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from src.draft_manager.config import DEFAULT_ROUNDS
from src.draft_manager.draft_initializer import DraftInitializer
from src.draft_manager.draft_rules import ValidationError
from src.draft_manager.league_manager import LeagueManager
from src.draft_manager.roster_validator import RosterValidator
from src.draft_manager.standings import draft_board, roster_table, standings_table
from src.draft_manager.state_persistence import DraftSession, StatePersistence
from src.logging_config import setup_logging
from src.player_pool.catalog import PlayerCatalog

logger = logging.getLogger(__name__)


def _load_catalog(path: Optional[Path]) -> PlayerCatalog:
    try:
        if path is not None and path.suffix.lower() == ".csv":
            return PlayerCatalog.from_csv(path)
        return PlayerCatalog.from_json(path)
    except FileNotFoundError as e:
        raise ValidationError(f"Player catalog not found: {e.filename}") from e


def _load_session(store: StatePersistence, draft_id: str) -> DraftSession:
    session = store.load_session(draft_id)
    if session is None:
        raise ValidationError(f"No saved draft {draft_id}")
    return session


def _team_name(session: DraftSession, contestant_id: Optional[str]) -> str:
    if contestant_id is None:
        return "-"
    return session.get_contestant(contestant_id).team_name


def cmd_new(store: StatePersistence, args) -> int:
    team_names = [t.strip() for t in args.teams.split(",") if t.strip()]
    manager = LeagueManager()
    league = manager.create_league(args.league, len(team_names))

    contestants = []
    for i, team_name in enumerate(team_names):
        league, contestant = manager.join_league(
            league, contestants, f"user-{i + 1}", team_name
        )
        contestants.append(contestant)

    rng = random.Random(args.seed) if args.seed is not None else None
    draft = DraftInitializer(rng=rng).create_draft(
        league, contestants, rounds=args.rounds
    )
    store.save_session(DraftSession(league=league, draft=draft, contestants=contestants))
    print(draft.draft_id)
    return 0


def cmd_list(store: StatePersistence, args) -> int:
    for d in store.list_saved_drafts():
        state = "complete" if d["completed"] else f"round {d['current_round']}"
        print(f"{d['draft_id']}  {d['league_name']} ({d['league_size']} teams, {state})")
    return 0


def cmd_status(store: StatePersistence, args) -> int:
    session = _load_session(store, args.draft_id)
    draft = session.draft
    print(f"League: {session.league.name} [{LeagueManager.league_status(session.league)}]")
    print("Order: " + ", ".join(_team_name(session, cid) for cid in draft.order))
    if draft.completed:
        print(f"Draft complete ({draft.overall_pick} picks)")
    else:
        print(
            f"Round {draft.current_round}/{draft.rounds}, "
            f"pick {draft.overall_pick + 1} of {draft.total_picks()}: "
            f"{_team_name(session, draft.active_contestant_id())} on the clock"
        )
    return 0


def cmd_available(store: StatePersistence, args) -> int:
    session = _load_session(store, args.draft_id)
    catalog = _load_catalog(args.catalog)
    active_id = session.draft.active_contestant_id()
    contestant = session.get_contestant(active_id) if active_id else None
    df = catalog.available_players(session.draft, contestant, position=args.position)
    print(df.head(args.limit).to_string(index=False))
    return 0


def cmd_pick(store: StatePersistence, args) -> int:
    session = _load_session(store, args.draft_id)
    catalog = _load_catalog(args.catalog)
    try:
        player = catalog.get_player(args.player_id)
    except KeyError as e:
        raise ValidationError(str(e.args[0])) from e

    contestant_id = args.contestant or session.draft.active_contestant_id()
    if contestant_id is None:
        raise ValidationError("Nobody is on the clock")
    if contestant_id not in {c.contestant_id for c in session.contestants}:
        raise ValidationError(f"No contestant {contestant_id} in this draft")

    outcome = store.commit_pick(args.draft_id, contestant_id, player)
    result = outcome.result
    print(
        f"Pick {result.pick_number}: {result.picking_team} selects "
        f"{result.player_name} ({result.position}, {result.team_name}) -> {result.slot}"
    )
    if outcome.league_drafted_now:
        print("Draft complete!")
    return 0


def cmd_board(store: StatePersistence, args) -> int:
    session = _load_session(store, args.draft_id)
    if not session.draft.results:
        print("no picks made yet")
        return 0
    print(draft_board(session.draft).to_string(index=False))
    return 0


def cmd_roster(store: StatePersistence, args) -> int:
    session = _load_session(store, args.draft_id)
    matches = [c for c in session.contestants if c.team_name == args.team]
    if not matches:
        raise ValidationError(f"No team named {args.team}")
    contestant = matches[0]
    print(roster_table(contestant).fillna("-").to_string(index=False))

    summary = RosterValidator().get_roster_summary(contestant)
    needs = [f"{label} {s['remaining']}" for label, s in summary.items() if s["remaining"]]
    print("Open: " + (", ".join(needs) if needs else "none"))
    return 0


def cmd_standings(store: StatePersistence, args) -> int:
    session = _load_session(store, args.draft_id)
    print(standings_table(session.contestants).to_string(index=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run_draft", description=__doc__.splitlines()[0])
    parser.add_argument("--storage", type=Path, default=None, help="Draft storage directory")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="Create a league and start its draft")
    p.add_argument("league")
    p.add_argument("teams", help="Comma-separated team names")
    p.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS)
    p.add_argument("--seed", type=int, default=None)
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("list", help="List saved drafts")
    p.set_defaults(func=cmd_list)

    for name, func in (
        ("status", cmd_status),
        ("board", cmd_board),
        ("standings", cmd_standings),
    ):
        p = sub.add_parser(name)
        p.add_argument("draft_id")
        p.set_defaults(func=func)

    p = sub.add_parser("available", help="Players the team on the clock can take")
    p.add_argument("draft_id")
    p.add_argument("--catalog", type=Path, default=None, help="Player catalog (default data/players.json)")
    p.add_argument("--position", default=None)
    p.add_argument("--limit", type=int, default=25)
    p.set_defaults(func=cmd_available)

    p = sub.add_parser("pick", help="Draft a player for the team on the clock")
    p.add_argument("draft_id")
    p.add_argument("player_id")
    p.add_argument("--catalog", type=Path, default=None, help="Player catalog (default data/players.json)")
    p.add_argument("--contestant", default=None)
    p.set_defaults(func=cmd_pick)

    p = sub.add_parser("roster", help="Show one team's roster")
    p.add_argument("draft_id")
    p.add_argument("team")
    p.set_defaults(func=cmd_roster)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    store = StatePersistence(storage_dir=args.storage)
    try:
        return args.func(store, args)
    except ValidationError as e:
        logger.warning("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    setup_logging()
    sys.exit(main())
