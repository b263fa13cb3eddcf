"""
Constants for the padel league.
"""

# Tournament format: 4 teams of 2 on 2 courts, 3 rounds
TEAM_SIZE = 2
TEAMS_PER_TOURNAMENT = 4
PLAYERS_PER_TOURNAMENT = TEAM_SIZE * TEAMS_PER_TOURNAMENT
COURTS = (1, 2)
ROUNDS = 3

# Match status
MATCH_SCHEDULED = "scheduled"
MATCH_LIVE = "live"
MATCH_FINISHED = "finished"
MATCH_STATUSES = (MATCH_SCHEDULED, MATCH_LIVE, MATCH_FINISHED)

# Tournament status
TOURNAMENT_SCHEDULED = "scheduled"
TOURNAMENT_LIVE = "live"
TOURNAMENT_FINISHED = "finished"
TOURNAMENT_CANCELLED = "cancelled"
TOURNAMENT_STATUSES = (
    TOURNAMENT_SCHEDULED,
    TOURNAMENT_LIVE,
    TOURNAMENT_FINISHED,
    TOURNAMENT_CANCELLED,
)

# Location type
LOCATION_INDOOR = "Indoor"
LOCATION_OUTDOOR = "Outdoor"
LOCATION_TYPES = (LOCATION_INDOOR, LOCATION_OUTDOOR)

# Tie handling when closing a round.
# "team1": a tied match counts team1 as the winner when seeding the next round.
# "forbid": a round with a tied match cannot be closed.
TIE_TEAM1 = "team1"
TIE_FORBID = "forbid"
TIE_POLICIES = (TIE_TEAM1, TIE_FORBID)

# Rating rules
INITIAL_RATING = 1000
RATING_FLOOR = 800
WIN_DELTA = 20
LOSS_DELTA = 12
CHAMPION_BONUS = 50
START_LABEL = "start"
DATE_LABEL_FORMAT = "%d %b"

# Player profile
RIVALS_SHOWN = 10

# Tier thresholds, highest first
LEVEL_1 = "Level 1"
LEVEL_2 = "Level 2"
LEVEL_3 = "Level 3"
LEVEL_PRO = "Pro"
TIERS = (
    (1600, LEVEL_PRO),
    (1400, LEVEL_3),
    (1200, LEVEL_2),
)
DEFAULT_LEVEL = LEVEL_1
