"""Game constants for Fish."""

# Suits
HEARTS = "hearts"
DIAMONDS = "diamonds"
CLUBS = "clubs"
SPADES = "spades"
SUITS = [HEARTS, DIAMONDS, CLUBS, SPADES]

# Suit display symbols
SUIT_SYMBOLS = {
    HEARTS: "♥",
    DIAMONDS: "♦",
    CLUBS: "♣",
    SPADES: "♠",
}

# Ranks (no 8s, no jokers)
LOW_RANKS = ["2", "3", "4", "5", "6", "7"]
HIGH_RANKS = ["9", "10", "J", "Q", "K", "A"]
RANKS = LOW_RANKS + HIGH_RANKS

# Half-suit levels
LOW = "low"
HIGH = "high"

# Game parameters
TOTAL_CARDS = 48
CARDS_PER_HALF_SUIT = 6
NUM_HALF_SUITS = 8
NUM_TEAMS = 2
MIN_PLAYERS = 4
MAX_PLAYERS = 8

# Turn phases (derived, never stored)
PHASE_AWAITING_ASK = "awaiting_ask"
PHASE_AWAITING_PASS = "awaiting_pass"
PHASE_LOBBY = "lobby"
PHASE_FINISHED = "finished"

# Claim outcomes
OUTCOME_CORRECT = "correct"
OUTCOME_WRONG_SEAT = "wrong_seat"
OUTCOME_WRONG_TEAM = "wrong_team"

# Room log entry kinds
LOG_SYSTEM = "system"
LOG_TURN = "turn"
LOG_SUCCESS = "success"
LOG_FAIL = "fail"
LOG_CLAIM_SUCCESS = "claim-success"
LOG_CLAIM_PARTIAL = "claim-partial"
LOG_CLAIM_FAIL = "claim-fail"
LOG_INFO = "info"

# Error codes
ERR_ROOM_NOT_FOUND = "room_not_found"
ERR_ROOM_FULL = "room_full"
ERR_GAME_IN_PROGRESS = "game_in_progress"
ERR_GAME_NOT_STARTED = "game_not_started"
ERR_GAME_FINISHED = "game_finished"
ERR_ALREADY_STARTED = "already_started"
ERR_INSUFFICIENT_PLAYERS = "insufficient_players"
ERR_UNEVEN_TEAMS = "uneven_teams"
ERR_INVALID_NAME = "invalid_name"
ERR_PLAYER_NOT_FOUND = "player_not_found"
ERR_NOT_YOUR_TURN = "not_your_turn"
ERR_EMPTY_HAND = "empty_hand"
ERR_SAME_TEAM = "same_team"
ERR_TARGET_EMPTY_HAND = "target_empty_hand"
ERR_INVALID_CARD = "invalid_card"
ERR_HALF_SUIT_NOT_HELD = "half_suit_not_held"
ERR_CARD_ALREADY_HELD = "card_already_held"
ERR_STILL_HAS_CARDS = "still_has_cards"
ERR_NOT_TEAMMATE = "not_teammate"
ERR_NOT_YOUR_TEAM_TURN = "not_your_team_turn"
ERR_UNKNOWN_HALF_SUIT = "unknown_half_suit"
ERR_HALF_SUIT_RESOLVED = "half_suit_resolved"
ERR_INCOMPLETE_CLAIM = "incomplete_claim"
ERR_BAD_REQUEST = "bad_request"
ERR_UNKNOWN_ACTION = "unknown_action"
ERR_INTERNAL = "internal_error"

# Rooms
ROOM_CODE_LENGTH = 4
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
