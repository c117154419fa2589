"""
Admin command line for the team database.

Usage:
  python manage.py init-db
  python manage.py add-player "Lucas" --position Portero
  python manage.py add-match "Atletico Barrio" 2024-05-11T10:00
  python manage.py record-result <match_id> 3 1 --stats stats.json
  python manage.py resolve-custom <bet_id> proposer_wins
  python manage.py scoreboard
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from config import DB_PATH, LOG_LEVEL
from domain.models.bet import Bet
from infrastructure.service_container import ServiceConfig, ServiceContainer
from services.result import Result


def _build_container(db_path: str) -> ServiceContainer:
    container = ServiceContainer(ServiceConfig(db_path=db_path))
    container.initialize()
    return container


def _fail(result: Result) -> int:
    print(f"ERROR ({result.error_code}): {result.error}", file=sys.stderr)
    return 1


def _describe_bet(bet: Bet) -> str:
    owner = bet.player_id if bet.bet_mode == "standard" else f"{bet.proposer_id} vs {bet.accepter_id or '?'}"
    payout = f" payout={bet.payout}" if bet.payout is not None else ""
    return f"{bet.bet_id} [{bet.status}] {bet.bet_mode}/{bet.bet_type} {bet.amount} ({owner}){payout}"


def _print_settlement(results: List[Result[Bet]]) -> int:
    settled, failed = Result.partition(results)
    for bet in settled:
        print(f"  settled {_describe_bet(bet)}")
    for failure in failed:
        print(f"  FAILED ({failure.error_code}): {failure.error}")
    print(f"Settled {len(settled)} bet(s), {len(failed)} failure(s).")
    return 1 if failed else 0


def cmd_init_db(container: ServiceContainer, args) -> int:
    print(f"Database ready: {container.config.db_path}")
    return 0


def cmd_add_player(container: ServiceContainer, args) -> int:
    result = container.player_service.register_player(
        args.name,
        position=args.position,
        photo_url=args.photo_url,
        player_id=args.player_id,
        coins=args.coins,
    )
    if not result:
        return _fail(result)
    player = result.value
    print(f"Added {player.name} ({player.player_id}) with {player.coins} coins")
    return 0


def cmd_players(container: ServiceContainer, args) -> int:
    for player in container.player_service.get_leaderboard(limit=args.limit):
        position = f" [{player.position}]" if player.position else ""
        print(f"{player.coins:>7}  {player.name}{position}  ({player.player_id})")
    return 0


def cmd_add_match(container: ServiceContainer, args) -> int:
    result = container.match_service.create_match(args.opponent, args.date, emoji=args.emoji)
    if not result:
        return _fail(result)
    print(f"Created match {result.value.match_id}: {result.value}")
    return 0


def cmd_record_result(container: ServiceContainer, args) -> int:
    stats = []
    if args.stats:
        with open(args.stats, encoding="utf-8") as fh:
            stats = json.load(fh)

    result = container.match_service.record_result(
        args.match_id, args.us, args.them, stats, video_url=args.video_url
    )
    if not result:
        return _fail(result)
    print(f"Recorded {result.value['match']}")
    return _print_settlement(result.value["settlement"])


def cmd_resolve_bets(container: ServiceContainer, args) -> int:
    return _print_settlement(container.betting_service.resolve_bets_for_match(args.match_id))


def cmd_resolve_custom(container: ServiceContainer, args) -> int:
    result = container.betting_service.resolve_custom_pvp_bet(args.bet_id, args.resolution)
    if not result:
        return _fail(result)
    print(f"Resolved {_describe_bet(result.value)}")
    return 0


def cmd_bets(container: ServiceContainer, args) -> int:
    betting = container.betting_service
    if args.player:
        bets = betting.get_player_bets(args.player)
    elif args.custom:
        bets = betting.get_custom_pvp_bets_for_match(args.custom)
    else:
        bets = betting.get_open_pvp_bets()
    if not bets:
        print("No bets.")
    for bet in bets:
        print(_describe_bet(bet))
    return 0


def cmd_scoreboard(container: ServiceContainer, args) -> int:
    print(f"{'MVP':>4} {'PJ':>3} {'G':>3} {'A':>3} {'YC':>3} {'RC':>3} {'C':>3}  Player")
    for row in container.scoreboard_service.get_player_stats():
        print(
            f"{row.mvp_score:>4} {row.matches_played:>3} {row.goals:>3} {row.assists:>3} "
            f"{row.yellow_cards:>3} {row.red_cards:>3} {row.cagadas:>3}  {row.name}"
        )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage the team database and the betting mini-game.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH or tiesada.db)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create the schema and apply migrations")
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser("add-player", help="Register a roster player")
    p.add_argument("name")
    p.add_argument("--position")
    p.add_argument("--photo-url")
    p.add_argument("--player-id")
    p.add_argument("--coins", type=int, default=None)
    p.set_defaults(func=cmd_add_player)

    p = sub.add_parser("players", help="List players by coins")
    p.add_argument("--limit", type=int, default=50)
    p.set_defaults(func=cmd_players)

    p = sub.add_parser("add-match", help="Schedule a match")
    p.add_argument("opponent")
    p.add_argument("date", help="ISO-8601 date/time")
    p.add_argument("--emoji")
    p.set_defaults(func=cmd_add_match)

    p = sub.add_parser("record-result", help="Record a final score and settle bets")
    p.add_argument("match_id")
    p.add_argument("us", type=int)
    p.add_argument("them", type=int)
    p.add_argument("--stats", help="JSON file with a list of per-player stat rows")
    p.add_argument("--video-url")
    p.set_defaults(func=cmd_record_result)

    p = sub.add_parser("resolve-bets", help="Settle open bets of a played match")
    p.add_argument("match_id")
    p.set_defaults(func=cmd_resolve_bets)

    p = sub.add_parser("resolve-custom", help="Resolve a custom PvP bet by hand")
    p.add_argument("bet_id")
    p.add_argument("resolution", choices=["proposer_wins", "accepter_wins", "void"])
    p.set_defaults(func=cmd_resolve_custom)

    p = sub.add_parser("bets", help="List bets (open PvP proposals by default)")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--player", help="Bets a player has coins in")
    group.add_argument("--custom", metavar="MATCH_ID", help="Open custom PvP bets of a match")
    p.set_defaults(func=cmd_bets)

    p = sub.add_parser("scoreboard", help="Season stats ranked by MVP score")
    p.set_defaults(func=cmd_scoreboard)

    return parser


def main(argv: List[str]) -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = _build_parser().parse_args(argv)
    container = _build_container(args.db_path)
    return args.func(container, args)


def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
