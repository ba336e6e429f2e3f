"""Tests for action validation."""

import pytest

from fish.game.halfsuits import cards_of
from fish.game.models import ClaimAssignment
from fish.game.scoring import find_holder
from fish.game.validator import validate_ask, validate_claim, validate_pass
from fish.utils.constants import (
    ERR_CARD_ALREADY_HELD,
    ERR_EMPTY_HAND,
    ERR_GAME_FINISHED,
    ERR_GAME_NOT_STARTED,
    ERR_HALF_SUIT_NOT_HELD,
    ERR_HALF_SUIT_RESOLVED,
    ERR_INCOMPLETE_CLAIM,
    ERR_INVALID_CARD,
    ERR_NOT_TEAMMATE,
    ERR_NOT_YOUR_TEAM_TURN,
    ERR_NOT_YOUR_TURN,
    ERR_PLAYER_NOT_FOUND,
    ERR_SAME_TEAM,
    ERR_STILL_HAS_CARDS,
    ERR_TARGET_EMPTY_HAND,
    ERR_UNKNOWN_HALF_SUIT,
)

from tests.conftest import c


@pytest.fixture
def room(table):
    return table.room()


@pytest.fixture
def ids(table):
    return table.ids


def true_claim(room, half_suit):
    return [
        ClaimAssignment(card=card, holder_id=find_holder(room, card))
        for card in cards_of(half_suit)
    ]


class TestValidateAsk:
    def test_valid(self, room, ids):
        result = validate_ask(room, ids["A"], ids["B"], "3_hearts")
        assert result.valid
        assert result.error is None

    def test_game_not_started(self, room, ids):
        room.game_started = False
        result = validate_ask(room, ids["A"], ids["B"], "3_hearts")
        assert result.code == ERR_GAME_NOT_STARTED

    def test_game_finished(self, room, ids):
        room.claimed_suits = list(room.claimed_suits) + [
            "low_hearts", "high_hearts", "low_clubs", "high_clubs",
            "low_spades", "high_spades", "low_diamonds", "high_diamonds",
        ]
        result = validate_ask(room, ids["A"], ids["B"], "3_hearts")
        assert result.code == ERR_GAME_FINISHED

    def test_unknown_asker(self, room, ids):
        result = validate_ask(room, "ghost", ids["B"], "3_hearts")
        assert result.code == ERR_PLAYER_NOT_FOUND

    def test_unknown_target(self, room, ids):
        result = validate_ask(room, ids["A"], "ghost", "3_hearts")
        assert result.code == ERR_PLAYER_NOT_FOUND

    def test_not_your_turn(self, room, ids):
        result = validate_ask(room, ids["B"], ids["A"], "2_hearts")
        assert not result.valid
        assert result.code == ERR_NOT_YOUR_TURN
        assert "turn" in result.error.lower()

    def test_empty_hand(self, room, ids):
        room.get_player(ids["A"]).hand = []
        result = validate_ask(room, ids["A"], ids["B"], "3_hearts")
        assert result.code == ERR_EMPTY_HAND

    def test_teammate_target(self, room, ids):
        result = validate_ask(room, ids["A"], ids["C"], "4_hearts")
        assert result.code == ERR_SAME_TEAM

    def test_target_empty_hand(self, room, ids):
        room.get_player(ids["B"]).hand = []
        result = validate_ask(room, ids["A"], ids["B"], "3_hearts")
        assert result.code == ERR_TARGET_EMPTY_HAND

    @pytest.mark.parametrize("card_id", ["8_hearts", "joker", "3-hearts"])
    def test_invalid_card(self, room, ids, card_id):
        result = validate_ask(room, ids["A"], ids["B"], card_id)
        assert result.code == ERR_INVALID_CARD

    def test_half_suit_not_held(self, room, ids):
        a = room.get_player(ids["A"])
        a.hand = [card for card in a.hand if card not in (c("2_hearts"), c("6_hearts"))]
        result = validate_ask(room, ids["A"], ids["B"], "3_hearts")
        assert result.code == ERR_HALF_SUIT_NOT_HELD

    def test_card_already_held(self, room, ids):
        result = validate_ask(room, ids["A"], ids["B"], "2_hearts")
        assert result.code == ERR_CARD_ALREADY_HELD

    def test_asking_for_card_target_lacks_is_valid(self, room, ids):
        # D holds 5_hearts, B does not; a wrong guess is still a legal ask
        assert validate_ask(room, ids["A"], ids["B"], "5_hearts").valid


class TestValidatePass:
    def test_valid(self, room, ids):
        room.get_player(ids["A"]).hand = []
        assert validate_pass(room, ids["A"], ids["C"]).valid

    def test_still_has_cards(self, room, ids):
        result = validate_pass(room, ids["A"], ids["C"])
        assert result.code == ERR_STILL_HAS_CARDS

    def test_not_your_turn(self, room, ids):
        room.get_player(ids["C"]).hand = []
        result = validate_pass(room, ids["C"], ids["A"])
        assert result.code == ERR_NOT_YOUR_TURN

    def test_opponent_target(self, room, ids):
        room.get_player(ids["A"]).hand = []
        result = validate_pass(room, ids["A"], ids["B"])
        assert result.code == ERR_NOT_TEAMMATE

    def test_self_target(self, room, ids):
        room.get_player(ids["A"]).hand = []
        result = validate_pass(room, ids["A"], ids["A"])
        assert result.code == ERR_NOT_TEAMMATE

    def test_teammate_empty(self, room, ids):
        room.get_player(ids["A"]).hand = []
        room.get_player(ids["C"]).hand = []
        result = validate_pass(room, ids["A"], ids["C"])
        assert result.code == ERR_TARGET_EMPTY_HAND


class TestValidateClaim:
    def test_valid(self, room, ids):
        assert validate_claim(room, ids["A"], "low_hearts", true_claim(room, "low_hearts")).valid

    def test_teammate_of_current_player_may_claim(self, room, ids):
        assert validate_claim(room, ids["C"], "low_hearts", true_claim(room, "low_hearts")).valid

    def test_opposing_team_may_not_claim(self, room, ids):
        result = validate_claim(room, ids["B"], "low_hearts", true_claim(room, "low_hearts"))
        assert result.code == ERR_NOT_YOUR_TEAM_TURN

    def test_unknown_claimer(self, room):
        result = validate_claim(room, "ghost", "low_hearts", true_claim(room, "low_hearts"))
        assert result.code == ERR_PLAYER_NOT_FOUND

    def test_unknown_half_suit(self, room, ids):
        result = validate_claim(room, ids["A"], "mid_hearts", true_claim(room, "low_hearts"))
        assert result.code == ERR_UNKNOWN_HALF_SUIT

    def test_already_claimed(self, room, ids):
        assignments = true_claim(room, "low_hearts")
        room.claimed_suits.append("low_hearts")
        result = validate_claim(room, ids["A"], "low_hearts", assignments)
        assert result.code == ERR_HALF_SUIT_RESOLVED

    def test_already_middled(self, room, ids):
        assignments = true_claim(room, "low_hearts")
        room.middle_suits.append("low_hearts")
        result = validate_claim(room, ids["A"], "low_hearts", assignments)
        assert result.code == ERR_HALF_SUIT_RESOLVED

    def test_too_few_assignments(self, room, ids):
        result = validate_claim(room, ids["A"], "low_hearts", true_claim(room, "low_hearts")[:5])
        assert result.code == ERR_INCOMPLETE_CLAIM

    def test_duplicate_card(self, room, ids):
        assignments = true_claim(room, "low_hearts")
        assignments[5] = assignments[0]
        result = validate_claim(room, ids["A"], "low_hearts", assignments)
        assert result.code == ERR_INCOMPLETE_CLAIM

    def test_card_from_other_half_suit(self, room, ids):
        assignments = true_claim(room, "low_hearts")
        assignments[0] = ClaimAssignment(card=c("9_hearts"), holder_id=ids["C"])
        result = validate_claim(room, ids["A"], "low_hearts", assignments)
        assert result.code == ERR_INCOMPLETE_CLAIM

    def test_extra_assignment(self, room, ids):
        assignments = true_claim(room, "low_hearts") + [
            ClaimAssignment(card=c("9_hearts"), holder_id=ids["C"])
        ]
        result = validate_claim(room, ids["A"], "low_hearts", assignments)
        assert result.code == ERR_INCOMPLETE_CLAIM

    def test_unknown_holder(self, room, ids):
        assignments = true_claim(room, "low_hearts")
        assignments[2] = ClaimAssignment(card=assignments[2].card, holder_id="ghost")
        result = validate_claim(room, ids["A"], "low_hearts", assignments)
        assert result.code == ERR_PLAYER_NOT_FOUND
