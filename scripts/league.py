#!/usr/bin/env python3
"""
Standings, ratings and statistics from a league backup file.

Usage:
    python scripts/league.py BACKUP --ratings

Examples:
    # Rating leaderboard
    python scripts/league.py padel_backup.json --ratings

    # Final standings of one tournament
    python scripts/league.py padel_backup.json --standings TOURNAMENT_ID

    # One player's rating trajectory and career profile
    python scripts/league.py padel_backup.json --history PLAYER_ID
    python scripts/league.py padel_backup.json --profile PLAYER_ID

    # Player and duo statistics
    python scripts/league.py padel_backup.json --stats

    # Import the backup into the web server's database
    python scripts/league.py padel_backup.json --import-to data
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.tournament.display import (
    format_duo_stats,
    format_leaderboard,
    format_player_profile,
    format_player_stats,
    format_rating_history,
    format_round,
    format_standings,
)
from src.tournament.models import player_lookup
from src.tournament.rating import compute_ratings
from src.tournament.standings import compute_standings
from src.tournament.stats import compute_duo_stats, compute_player_profile, compute_player_stats
from src.tournament.storage import LeagueStorage, load_backup


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Show standings, ratings and statistics from a league backup.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        'backup',
        type=str,
        help='Path to a padel_backup.json file'
    )
    parser.add_argument(
        '--ratings', '-r',
        action='store_true',
        help='Show the rating leaderboard'
    )
    parser.add_argument(
        '--standings', '-s',
        type=str, metavar='TOURNAMENT_ID', default=None,
        help='Show the standings of one tournament'
    )
    parser.add_argument(
        '--history',
        type=str, metavar='PLAYER_ID', default=None,
        help="Show one player's rating history"
    )
    parser.add_argument(
        '--profile',
        type=str, metavar='PLAYER_ID', default=None,
        help="Show one player's partners, victims and black beasts"
    )
    parser.add_argument(
        '--stats',
        action='store_true',
        help='Show player and duo statistics'
    )
    parser.add_argument(
        '--import-to',
        type=str, metavar='DATA_DIR', default=None,
        help='Import the backup into the league database in DATA_DIR'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not Path(args.backup).exists():
        print(f"Error: backup not found: {args.backup}")
        return 1

    players, locations, tournaments = load_backup(args.backup)
    lookup = player_lookup(players)

    if args.import_to:
        counts = LeagueStorage(args.import_to).import_backup(args.backup)
        print(f"Imported {counts['players']} players, {counts['locations']} locations "
              f"and {counts['tournaments']} tournaments")

    if args.standings:
        tournament = next((t for t in tournaments if t.id == args.standings), None)
        if tournament is None:
            print(f"Error: tournament not found: {args.standings}")
            return 1
        for round_number in range(1, tournament.current_round + 1):
            print(f"Round {round_number}")
            print(format_round(tournament.round_matches(round_number), lookup))
        venue = next((loc.name for loc in locations if loc.id == tournament.location_id), None)
        title = f"STANDINGS {tournament.date}" + (f" @ {venue}" if venue else "")
        print()
        print(format_standings(compute_standings(tournament.matches or [], lookup), title=title))

    ratings = compute_ratings(players, tournaments)

    if args.history:
        if args.history not in lookup:
            print(f"Error: player not found: {args.history}")
            return 1
        print(format_rating_history(lookup[args.history], ratings[args.history]))

    if args.profile:
        if args.profile not in lookup:
            print(f"Error: player not found: {args.profile}")
            return 1
        profile = compute_player_profile(args.profile, players, tournaments)
        print(format_player_profile(lookup[args.profile], profile))

    if args.stats:
        print(format_player_stats(compute_player_stats(players, tournaments), lookup))
        print()
        print(format_duo_stats(compute_duo_stats(tournaments), lookup))

    if args.ratings or not (args.standings or args.history or args.profile
                            or args.stats or args.import_to):
        print(format_leaderboard(ratings, lookup))

    return 0


if __name__ == "__main__":
    sys.exit(main())
