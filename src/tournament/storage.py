"""
Storage backend for league data.

Uses SQLite for players, locations, tournaments and matches. Only source
data is stored; ratings and standings are always recomputed from it. JSON
backups use the padel_backup.json layout
({"players": [...], "locations": [...], "history": [...], "date": ...}).
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from src.tournament.errors import (
    LocationNotFoundError,
    PlayerNotFoundError,
    TournamentNotFoundError,
)
from src.tournament.models import Location, Match, Player, Tournament

logger = logging.getLogger(__name__)


class LeagueStorage:
    """
    Handles persistent storage of players, locations and tournaments.

    Uses SQLite tables in the league.db database.
    """

    def __init__(self, data_dir: str = "data"):
        """
        Initialize storage backend.

        Args:
            data_dir: Base directory for data storage
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / "league.db"

        # Ensure directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize SQLite database schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    player_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    last_name TEXT,
                    nickname TEXT,
                    position INTEGER NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS locations (
                    location_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL,
                    address TEXT,
                    image_url TEXT,
                    google_maps_url TEXT,
                    website_url TEXT
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournaments (
                    tournament_id TEXT PRIMARY KEY,
                    date TEXT NOT NULL,
                    time TEXT,
                    duration INTEGER,
                    location_id TEXT,
                    status TEXT NOT NULL DEFAULT 'scheduled',
                    confirmed_player_ids TEXT NOT NULL DEFAULT '[]',
                    has_matches INTEGER NOT NULL DEFAULT 0
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS matches (
                    tournament_id TEXT NOT NULL,
                    match_id TEXT NOT NULL,
                    round INTEGER NOT NULL,
                    court INTEGER NOT NULL,
                    team1 TEXT NOT NULL,
                    team2 TEXT NOT NULL,
                    score1 INTEGER NOT NULL DEFAULT 0,
                    score2 INTEGER NOT NULL DEFAULT 0,
                    status TEXT NOT NULL,
                    date TEXT,
                    PRIMARY KEY (tournament_id, match_id),
                    FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id)
                )
            """)

            conn.execute("CREATE INDEX IF NOT EXISTS idx_tournaments_status ON tournaments(status)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_matches_tournament ON matches(tournament_id)")

            conn.commit()

    # -------------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------------

    def save_player(self, player: Player) -> Player:
        """Insert or update a player, keeping its roster position."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT position FROM players WHERE player_id = ?", (player.id,)
            ).fetchone()
            if row:
                position = row["position"]
            else:
                position = conn.execute(
                    "SELECT COALESCE(MAX(position), -1) + 1 FROM players"
                ).fetchone()[0]
            conn.execute("""
                INSERT OR REPLACE INTO players (player_id, name, last_name, nickname, position)
                VALUES (?, ?, ?, ?, ?)
            """, (player.id, player.name, player.last_name, player.nickname, position))
            conn.commit()
        return player

    def get_player(self, player_id: str) -> Player:
        """Load a player by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM players WHERE player_id = ?", (player_id,)
            ).fetchone()
        if not row:
            raise PlayerNotFoundError(player_id)
        return self._row_to_player(row)

    def list_players(self) -> List[Player]:
        """All players in roster order."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY position").fetchall()
        return [self._row_to_player(r) for r in rows]

    def delete_player(self, player_id: str):
        """Remove a player from the roster. Past matches keep their ids."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM players WHERE player_id = ?", (player_id,))
            conn.commit()
        if cursor.rowcount == 0:
            raise PlayerNotFoundError(player_id)

    @staticmethod
    def _row_to_player(row: sqlite3.Row) -> Player:
        return Player(
            id=row["player_id"],
            name=row["name"],
            last_name=row["last_name"],
            nickname=row["nickname"],
        )

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    def save_location(self, location: Location) -> Location:
        """Insert or update a location."""
        with self._connect() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO locations
                (location_id, name, type, address, image_url, google_maps_url, website_url)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                location.id,
                location.name,
                location.type,
                location.address,
                location.image_url,
                location.google_maps_url,
                location.website_url
            ))
            conn.commit()
        return location

    def get_location(self, location_id: str) -> Location:
        """Load a location by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM locations WHERE location_id = ?", (location_id,)
            ).fetchone()
        if not row:
            raise LocationNotFoundError(location_id)
        return self._row_to_location(row)

    def list_locations(self) -> List[Location]:
        """All locations by name."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM locations ORDER BY name").fetchall()
        return [self._row_to_location(r) for r in rows]

    def delete_location(self, location_id: str):
        """Remove a location. Tournaments played there keep the id."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM locations WHERE location_id = ?", (location_id,))
            conn.commit()
        if cursor.rowcount == 0:
            raise LocationNotFoundError(location_id)

    @staticmethod
    def _row_to_location(row: sqlite3.Row) -> Location:
        return Location(
            id=row["location_id"],
            name=row["name"],
            type=row["type"],
            address=row["address"],
            image_url=row["image_url"],
            google_maps_url=row["google_maps_url"],
            website_url=row["website_url"],
        )

    # -------------------------------------------------------------------------
    # Tournaments
    # -------------------------------------------------------------------------

    def save_tournament(self, tournament: Tournament) -> Tournament:
        """Insert or replace a tournament together with its matches."""
        with self._connect() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO tournaments
                (tournament_id, date, time, duration, location_id, status,
                 confirmed_player_ids, has_matches)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                tournament.id,
                tournament.date,
                tournament.time,
                tournament.duration,
                tournament.location_id,
                tournament.status,
                json.dumps(tournament.confirmed_player_ids),
                int(tournament.matches is not None)
            ))

            conn.execute("DELETE FROM matches WHERE tournament_id = ?", (tournament.id,))
            for m in tournament.matches or []:
                conn.execute("""
                    INSERT INTO matches
                    (tournament_id, match_id, round, court, team1, team2,
                     score1, score2, status, date)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    tournament.id,
                    m.id,
                    m.round,
                    m.court,
                    json.dumps(list(m.team1)),
                    json.dumps(list(m.team2)),
                    m.score1,
                    m.score2,
                    m.status,
                    m.date
                ))

            conn.commit()
        return tournament

    def load_tournament(self, tournament_id: str) -> Tournament:
        """Load a tournament by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM tournaments WHERE tournament_id = ?", (tournament_id,)
            ).fetchone()
            if not row:
                raise TournamentNotFoundError(tournament_id)
            match_rows = conn.execute(
                "SELECT * FROM matches WHERE tournament_id = ? ORDER BY round, court",
                (tournament_id,)
            ).fetchall()
        return self._row_to_tournament(row, match_rows)

    def list_tournaments(self, status: Optional[str] = None) -> List[Tournament]:
        """List tournaments, newest first, optionally filtered by status."""
        with self._connect() as conn:
            if status:
                rows = conn.execute(
                    "SELECT * FROM tournaments WHERE status = ? ORDER BY date DESC", (status,)
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM tournaments ORDER BY date DESC").fetchall()

            tournaments = []
            for row in rows:
                match_rows = conn.execute(
                    "SELECT * FROM matches WHERE tournament_id = ? ORDER BY round, court",
                    (row["tournament_id"],)
                ).fetchall()
                tournaments.append(self._row_to_tournament(row, match_rows))
        return tournaments

    def delete_tournament(self, tournament_id: str):
        """Delete a tournament and its matches."""
        with self._connect() as conn:
            conn.execute("DELETE FROM matches WHERE tournament_id = ?", (tournament_id,))
            cursor = conn.execute(
                "DELETE FROM tournaments WHERE tournament_id = ?", (tournament_id,)
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise TournamentNotFoundError(tournament_id)

    @staticmethod
    def _row_to_tournament(row: sqlite3.Row, match_rows: List[sqlite3.Row]) -> Tournament:
        matches = None
        if row["has_matches"]:
            matches = [
                Match(
                    id=r["match_id"],
                    team1=tuple(json.loads(r["team1"])),
                    team2=tuple(json.loads(r["team2"])),
                    court=r["court"],
                    round=r["round"],
                    score1=r["score1"],
                    score2=r["score2"],
                    status=r["status"],
                    date=r["date"]
                )
                for r in match_rows
            ]
        return Tournament(
            id=row["tournament_id"],
            date=row["date"],
            status=row["status"],
            confirmed_player_ids=json.loads(row["confirmed_player_ids"]),
            matches=matches,
            time=row["time"],
            duration=row["duration"],
            location_id=row["location_id"]
        )

    # -------------------------------------------------------------------------
    # Backups
    # -------------------------------------------------------------------------

    def export_backup(self, path: str) -> Dict[str, Any]:
        """Write all players, locations and tournaments to a JSON backup file."""
        data = {
            "players": [p.to_dict() for p in self.list_players()],
            "locations": [loc.to_dict() for loc in self.list_locations()],
            "history": [t.to_dict() for t in self.list_tournaments()],
            "date": datetime.now(timezone.utc).isoformat(),
        }
        Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Exported %d players, %d locations and %d tournaments to %s",
                    len(data["players"]), len(data["locations"]), len(data["history"]), path)
        return data

    def import_backup(self, path: str) -> Dict[str, int]:
        """
        Load players, locations and tournaments from a JSON backup file.

        Existing records with the same ids are replaced.

        Returns:
            Counts of imported players, locations and tournaments
        """
        players, locations, tournaments = load_backup(path)
        for player in players:
            self.save_player(player)
        for location in locations:
            self.save_location(location)
        for tournament in tournaments:
            self.save_tournament(tournament)
        logger.info("Imported %d players, %d locations and %d tournaments from %s",
                    len(players), len(locations), len(tournaments), path)
        return {"players": len(players), "locations": len(locations), "tournaments": len(tournaments)}


def load_backup(path: str) -> Tuple[List[Player], List[Location], List[Tournament]]:
    """
    Read a JSON backup without touching the database.

    Older backups without a "locations" key load with no locations.

    Returns:
        (players, locations, tournaments) tuple
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    players = [Player.from_dict(p) for p in data.get("players", [])]
    locations = [Location.from_dict(loc) for loc in data.get("locations", [])]
    tournaments = [Tournament.from_dict(t) for t in data.get("history", [])]
    return players, locations, tournaments
