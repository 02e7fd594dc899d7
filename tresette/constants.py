"""Game constants for Tresette."""

# Table layout
NUM_PLAYERS = 4
CARDS_PER_PLAYER = 10
TOTAL_DECK_CARDS = 40
HUMAN_SEAT = 0
HUMAN_PARTNER_SEAT = 2

# Scoring
LAST_TRICK_BONUS = 1
CAPPOTTO_SCORE = 17
ROUND_UP_THRESHOLD = 0.9
WINNING_SCORE_11 = 11
WINNING_SCORE_21 = 21
WINNING_SCORE_31 = 31
WINNING_SCORES = (WINNING_SCORE_11, WINNING_SCORE_21, WINNING_SCORE_31)

# Team ids (seats 0/2 and 1/3)
TEAM_1 = "Team1"
TEAM_2 = "Team2"

# Bot heuristics
STRONG_GAME_VALUE = 8  # Asso and above
TOP_GAME_VALUE = 9  # Due and Tre
BUSSO_MIN_STRONG_CARDS = 2
BUSSO_MIN_SUIT_CARDS_WITH_TOP = 2
LISCIO_MIN_POINT_CARDS = 3
VOLO_MAX_POINT_CARDS = 2
SIGN_ABSTAIN_PROBABILITY = 0.5
