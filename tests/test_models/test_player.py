"""Tests for Hand, Player, Team and the table."""

import pytest

from tresette.models.card import Card, Rank, Suit, get_all_cards
from tresette.models.exceptions import HandFullError, TeamAssignmentError
from tresette.models.player import BotPlayer, Hand, Player
from tresette.models.team import Team
from tresette.models.trick import Table


def _cards(n):
    return get_all_cards()[:n]


class TestHand:
    """Test Hand model."""

    def test_capacity(self):
        """An eleventh card is refused."""
        hand = Hand()
        for card in _cards(10):
            hand.add_card(card)
        with pytest.raises(HandFullError):
            hand.add_card(get_all_cards()[10])

    def test_remove_card(self):
        """Removing reports whether the card was held."""
        hand = Hand()
        card = _cards(1)[0]
        hand.add_card(card)
        assert hand.remove_card(card)
        assert not hand.remove_card(card)
        assert hand.is_empty()

    @pytest.mark.parametrize(
        ("from_index", "to_index", "expected"),
        [
            (0, 2, [1, 0, 2]),
            (0, 3, [1, 2, 0]),
            (2, 0, [2, 0, 1]),
            (1, 1, [0, 1, 2]),
            (2, 3, [0, 1, 2]),
        ],
    )
    def test_move_card(self, from_index, to_index, expected):
        """Moving puts the card in the target slot."""
        cards = _cards(3)
        hand = Hand()
        for card in cards:
            hand.add_card(card)
        hand.move_card(from_index, to_index)
        assert list(hand.cards) == [cards[i] for i in expected]

    def test_move_card_out_of_range(self):
        """Indices outside the hand raise IndexError."""
        hand = Hand()
        for card in _cards(3):
            hand.add_card(card)
        with pytest.raises(IndexError):
            hand.move_card(3, 0)
        with pytest.raises(IndexError):
            hand.move_card(0, 4)


class TestPlayer:
    """Test Player model."""

    def test_play_card(self):
        """Playing removes the card from the hand."""
        player = Player(id="P1", username="Alice")
        card = _cards(1)[0]
        player.add_card(card)
        assert player.play_card(card) == card
        assert player.has_no_cards()

    def test_play_missing_card(self):
        """Playing a card not held is an error."""
        player = Player(id="P1", username="Alice")
        with pytest.raises(ValueError, match="not in"):
            player.play_card(_cards(1)[0])

    def test_reset_for_new_deal(self):
        """Hand and won pile are cleared."""
        player = Player(id="P1", username="Alice")
        player.add_card(_cards(1)[0])
        player.add_won_cards(_cards(4))
        player.reset_for_new_deal()
        assert player.has_no_cards()
        assert player.won_cards == []

    def test_team_assigned_once(self):
        """Re-assigning the same team is a no-op, another team is refused."""
        player = Player(id="P1", username="Alice")
        player.assign_team("Team1")
        player.assign_team("Team1")
        assert player.team_id == "Team1"
        with pytest.raises(TeamAssignmentError):
            player.assign_team("Team2")

    def test_bot_player_defaults(self):
        """A bot player gets a strategy and the bot flag."""
        bot = BotPlayer(id="P2", username="Mario")
        assert bot.is_bot
        assert bot.strategy is not None


class TestTeam:
    """Test Team model."""

    def test_needs_two_distinct_members(self):
        """Teams are exactly two different players."""
        a = Player(id="P1", username="A")
        with pytest.raises(ValueError, match="exactly 2"):
            Team("Team1", [a])
        with pytest.raises(ValueError, match="Duplicate"):
            Team("Team1", [a, a])

    def test_assigns_members(self):
        """Both members receive the team id."""
        a, b = Player(id="P1", username="A"), Player(id="P3", username="C")
        team = Team("Team1", [a, b])
        assert a.team_id == b.team_id == "Team1"
        assert team.contains(a)
        assert team.contains_id("P3")
        assert not team.contains_id("P2")

    def test_raw_points(self):
        """Raw points add up the won cards of both members."""
        a, b = Player(id="P1", username="A"), Player(id="P3", username="C")
        team = Team("Team1", [a, b])
        a.add_won_cards([Card(Suit.DENARI, Rank.ASSO), Card(Suit.DENARI, Rank.SETTE)])
        b.add_won_cards([Card(Suit.COPPE, Rank.RE), Card(Suit.COPPE, Rank.TRE)])
        assert team.current_deal_raw_points() == pytest.approx(1.66)


class TestTable:
    """Test Table and Trick."""

    def test_leading_suit_fixed_by_first_card(self):
        """The first card sets the leading suit."""
        a, b = Player(id="P1", username="A"), Player(id="P2", username="B")
        table = Table()
        assert table.leading_suit is None
        table.add_card(a, Card(Suit.SPADE, Rank.SEI))
        table.add_card(b, Card(Suit.COPPE, Rank.TRE))
        assert table.leading_suit is Suit.SPADE
        assert table.codes() == ["SEI_SPADE", "TRE_COPPE"]

    def test_one_card_per_player(self):
        """A player cannot play twice in a trick."""
        a = Player(id="P1", username="A")
        table = Table()
        table.add_card(a, Card(Suit.SPADE, Rank.SEI))
        with pytest.raises(ValueError, match="already played"):
            table.add_card(a, Card(Suit.SPADE, Rank.RE))

    def test_clear_and_return(self):
        """Clearing hands back the cards and empties the table."""
        a, b = Player(id="P1", username="A"), Player(id="P2", username="B")
        table = Table()
        table.add_card(a, Card(Suit.SPADE, Rank.SEI))
        table.add_card(b, Card(Suit.SPADE, Rank.RE))
        cards = table.clear_and_return()
        assert cards == [Card(Suit.SPADE, Rank.SEI), Card(Suit.SPADE, Rank.RE)]
        assert table.is_empty()
        assert table.leading_suit is None
