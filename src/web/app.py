"""
FastAPI application for the padel league.
"""
from fastapi import FastAPI, HTTPException
from typing import List, Optional
import os

from src.web.models import (
    PlayerCreate, PlayerOut, PlayerUpdate, PlayerProfileOut, LocationCreate, LocationOut,
    TournamentCreate, TournamentOut, ConfirmedPlayersUpdate, StartRequest, ScoreUpdate,
    MatchOut, RoundResponse, StandingOut, RatingOut, PlayerStatsOut, DuoStatsOut
)
from src.web.league_manager import LeagueManager
from src.tournament.errors import (
    LeagueError, LocationNotFoundError, PlayerNotFoundError, TournamentNotFoundError
)
from src.tournament.storage import LeagueStorage

# Create FastAPI app
app = FastAPI(
    title="Padel League",
    description="Tournament fixtures, standings and player ratings",
    version="1.0.0"
)

# Global instance (initialized in startup)
manager: Optional[LeagueManager] = None


@app.on_event("startup")
async def startup():
    """Initialize the league manager on startup."""
    global manager

    data_dir = os.environ.get("LEAGUE_DATA_DIR", "data")
    tie_policy = os.environ.get("LEAGUE_TIE_POLICY") or None
    manager = LeagueManager(LeagueStorage(data_dir=data_dir), tie_policy=tie_policy)


def _http_error(e: LeagueError) -> HTTPException:
    if isinstance(e, (PlayerNotFoundError, TournamentNotFoundError, LocationNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# =============================================================================
# Players
# =============================================================================

@app.get("/api/players", response_model=List[PlayerOut])
async def list_players():
    """List players with their current rating and level."""
    return [PlayerOut.from_player(p) for p in manager.list_players()]


@app.post("/api/players", response_model=PlayerOut)
async def create_player(body: PlayerCreate):
    """Add a player to the roster."""
    player = manager.add_player(body.name, body.last_name, body.nickname)
    return PlayerOut.from_player(player)


@app.delete("/api/players/{player_id}")
async def delete_player(player_id: str):
    """Remove a player from the roster."""
    try:
        manager.delete_player(player_id)
    except LeagueError as e:
        raise _http_error(e)
    return {"status": "deleted"}


@app.put("/api/players/{player_id}", response_model=PlayerOut)
async def update_player(player_id: str, body: PlayerUpdate):
    """Rename a player."""
    try:
        player = manager.update_player(player_id, body.name, body.last_name, body.nickname)
    except LeagueError as e:
        raise _http_error(e)
    return PlayerOut.from_player(player)


@app.get("/api/players/{player_id}/profile", response_model=PlayerProfileOut)
async def get_profile(player_id: str):
    """Career profile of one player: titles, partners, victims and black beasts."""
    try:
        profile = manager.player_profile(player_id)
    except LeagueError as e:
        raise _http_error(e)
    return PlayerProfileOut.from_profile(profile)


@app.get("/api/players/{player_id}/rating", response_model=RatingOut)

async def get_rating_history(player_id: str):
    """Rating trajectory of one player."""
    try:
        record = manager.rating_history(player_id)
    except LeagueError as e:
        raise _http_error(e)
    return RatingOut.from_record(player_id, record)


# =============================================================================
# Locations
# =============================================================================

@app.get("/api/locations", response_model=List[LocationOut])
async def list_locations():
    """List venues by name."""
    return [LocationOut.from_location(loc) for loc in manager.list_locations()]


@app.post("/api/locations", response_model=LocationOut)
async def create_location(body: LocationCreate):
    """Register a venue."""
    location = manager.add_location(
        body.name,
        type=body.type,
        address=body.address,
        image_url=body.image_url,
        google_maps_url=body.google_maps_url,
        website_url=body.website_url
    )
    return LocationOut.from_location(location)


@app.delete("/api/locations/{location_id}")
async def delete_location(location_id: str):
    """Remove a venue."""
    try:
        manager.delete_location(location_id)
    except LeagueError as e:
        raise _http_error(e)
    return {"status": "deleted"}


# =============================================================================
# Tournaments
# =============================================================================

@app.get("/api/tournaments", response_model=List[TournamentOut])
async def list_tournaments(status: Optional[str] = None):
    """List tournaments, newest first."""
    try:
        tournaments = manager.list_tournaments(status)
    except LeagueError as e:
        raise _http_error(e)
    return [TournamentOut.from_tournament(t) for t in tournaments]



@app.post("/api/tournaments", response_model=TournamentOut)
async def create_tournament(body: TournamentCreate):
    """Schedule a tournament."""
    try:
        tournament = manager.create_tournament(
            date=body.date,
            confirmed_player_ids=body.confirmed_player_ids,
            time=body.time,
            duration=body.duration,
            location_id=body.location_id
        )
    except LeagueError as e:
        raise _http_error(e)
    return TournamentOut.from_tournament(tournament)


@app.get("/api/tournaments/{tournament_id}", response_model=TournamentOut)
async def get_tournament(tournament_id: str):
    """Get a tournament with its matches."""
    try:
        tournament = manager.get_tournament(tournament_id)
    except LeagueError as e:
        raise _http_error(e)
    return TournamentOut.from_tournament(tournament)


@app.put("/api/tournaments/{tournament_id}/players", response_model=TournamentOut)
async def set_confirmed_players(tournament_id: str, body: ConfirmedPlayersUpdate):
    """Replace who is attending a tournament that has not started."""
    try:
        tournament = manager.set_confirmed_players(tournament_id, body.player_ids)
    except LeagueError as e:
        raise _http_error(e)
    return TournamentOut.from_tournament(tournament)


@app.post("/api/tournaments/{tournament_id}/start", response_model=TournamentOut)

async def start_tournament(tournament_id: str, body: StartRequest):
    """Draw teams (or use the given ones) and start round 1."""
    try:
        tournament = manager.start_tournament(tournament_id, teams=body.teams, seed=body.seed)
    except LeagueError as e:
        raise _http_error(e)
    return TournamentOut.from_tournament(tournament)


@app.post("/api/tournaments/{tournament_id}/matches/{match_id}/score", response_model=MatchOut)
async def update_score(tournament_id: str, match_id: str, body: ScoreUpdate):
    """Add or remove a point on a live match."""
    try:
        match = manager.update_score(tournament_id, match_id, body.side, body.increment)
    except LeagueError as e:
        raise _http_error(e)
    return MatchOut.from_match(match)


@app.post("/api/tournaments/{tournament_id}/next-round", response_model=RoundResponse)
async def next_round(tournament_id: str):
    """Close the current round and generate the next one."""
    try:
        outcome = manager.advance(tournament_id)
    except LeagueError as e:
        raise _http_error(e)
    return RoundResponse(
        current_round=outcome.current_round,
        advanced=outcome.advanced,
        completed=outcome.completed,
        new_matches=[MatchOut.from_match(m) for m in outcome.new_matches]
    )


@app.post("/api/tournaments/{tournament_id}/cancel", response_model=TournamentOut)
async def cancel_tournament(tournament_id: str):
    """Cancel a tournament that has not finished."""
    try:
        tournament = manager.cancel_tournament(tournament_id)
    except LeagueError as e:
        raise _http_error(e)
    return TournamentOut.from_tournament(tournament)


@app.delete("/api/tournaments/{tournament_id}")
async def delete_tournament(tournament_id: str):
    """Delete a tournament from the history."""
    try:
        manager.delete_tournament(tournament_id)
    except LeagueError as e:
        raise _http_error(e)
    return {"status": "deleted"}


@app.get("/api/tournaments/{tournament_id}/standings", response_model=List[StandingOut])
async def get_standings(tournament_id: str):
    """Team standings of a tournament, live or finished."""
    try:
        standings = manager.standings(tournament_id)
    except LeagueError as e:
        raise _http_error(e)
    return [StandingOut.from_entry(i, entry) for i, entry in enumerate(standings, 1)]


# =============================================================================
# Rankings
# =============================================================================

@app.get("/api/rankings", response_model=List[RatingOut])
async def get_rankings():
    """All players' ratings, highest first."""
    ratings = manager.ratings()
    ranked = sorted(ratings.items(), key=lambda item: item[1].current, reverse=True)
    return [RatingOut.from_record(pid, record) for pid, record in ranked]


@app.get("/api/stats", response_model=List[PlayerStatsOut])
async def get_stats():
    """Career statistics of every player who has played."""
    return [PlayerStatsOut.from_stats(s) for s in manager.player_stats()]


@app.get("/api/stats/duos", response_model=List[DuoStatsOut])
async def get_duo_stats(min_games: int = 2):
    """Win rates of pairs that played together at least min_games times."""
    return [DuoStatsOut.from_duo(d) for d in manager.duo_stats(min_games)]



@app.get("/")
async def index():
    return {"message": "Padel League API. Use /docs for API documentation."}
