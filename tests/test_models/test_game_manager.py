"""Tests for the match coordinator."""

import random

import pytest

from tresette.models.events import (
    DealEnded,
    DealStarted,
    GameEnded,
    ScoresUpdated,
)
from tresette.models.game_manager import GameManager


@pytest.fixture
def events():
    """Collected match events."""
    return []


@pytest.fixture
def bot_match(all_bots, manual_loop, events):
    """A bot-only match to 11 on the manual loop."""
    manager = GameManager(all_bots, 11, loop=manual_loop, rng=random.Random(5))
    manager.subscribe(events.append)
    return manager


class TestSetup:
    """Seats and teams."""

    def test_teams_by_seat(self, bot_match, all_bots):
        """Seats 0/2 form Team1 and 1/3 Team2."""
        team1, team2 = bot_match.teams
        assert team1.id == "Team1"
        assert team1.members == (all_bots[0], all_bots[2])
        assert team2.members == (all_bots[1], all_bots[3])
        assert bot_match.get_total_scores() == {"Team1": 0, "Team2": 0}

    def test_needs_four_players(self, all_bots):
        """Other table sizes are refused."""
        with pytest.raises(ValueError, match="exactly 4"):
            GameManager(all_bots[:2])

    def test_positive_target(self, all_bots):
        """The winning score must be positive."""
        with pytest.raises(ValueError, match="positive"):
            GameManager(all_bots, 0)

    def test_nothing_before_start(self, bot_match):
        """Before the first deal there is no current player."""
        assert bot_match.current_player is None
        assert bot_match.is_current_deal_over()
        assert not bot_match.is_game_over()


class TestDeals:
    """Deal sequencing and scoring."""

    def test_start_game_deals(self, bot_match, events):
        """start_game starts deal 0."""
        assert bot_match.start_game()
        assert isinstance(events[0], DealStarted)
        assert bot_match.current_deal.deal_index == 0

    def test_no_second_deal_while_running(self, bot_match):
        """start_next_deal is a no-op during a deal."""
        bot_match.start_game()
        assert not bot_match.start_next_deal()
        assert bot_match.current_deal.deal_index == 0

    def test_deal_scored_after_deal_ended(self, bot_match, manual_loop, events):
        """DealEnded is forwarded, then ScoresUpdated follows."""
        bot_match.start_game()
        manual_loop.run_until_idle()
        kinds = [type(e) for e in events]
        ended = kinds.index(DealEnded)
        assert kinds[ended + 1] is ScoresUpdated

        scores = events[ended + 1]
        deal_total = sum(scores.deal_points.values())
        # 10 rounded points plus the bonus, or a cappotto
        assert deal_total in (10, 11, 17)
        assert dict(scores.cumulative_scores) == bot_match.get_total_scores()
        assert scores.deal_winner_id in ("Team1", "Team2")
        assert scores.last_deal_snapshot == events[ended].snapshot
        assert bot_match.get_last_deal_points() == dict(scores.deal_points)

    def test_deal_indices_increment(self, all_bots, manual_loop):
        """Each new deal gets the next index."""
        # One deal scores at most 17, so a match to 31 is still running
        manager = GameManager(all_bots, 31, loop=manual_loop, rng=random.Random(5))
        manager.start_game()
        manual_loop.run_until_idle()
        assert not manager.is_game_over()
        assert manager.start_next_deal()
        assert manager.current_deal.deal_index == 1

    def test_next_deal_started_from_deal_ended(self, all_bots, manual_loop):
        """A listener dealing again on DealEnded does not lose the finished deal's points."""
        manager = GameManager(all_bots, 31, loop=manual_loop, rng=random.Random(5))
        events = []

        def deal_again(event):
            events.append(event)
            if isinstance(event, DealEnded) and event.snapshot.deal_index == 0:
                assert manager.start_next_deal()

        manager.subscribe(deal_again)
        manager.start_game()
        while manager.current_deal.deal_index == 0:
            assert manual_loop.run_next()

        scores = next(e for e in events if isinstance(e, ScoresUpdated))
        assert sum(scores.deal_points.values()) in (10, 11, 17)
        assert scores.deal_winner_id in ("Team1", "Team2")
        assert dict(scores.cumulative_scores) == dict(scores.deal_points)
        assert manager.get_total_scores() == dict(scores.deal_points)
        assert scores.last_deal_snapshot.deal_index == 0
        assert all(len(p.hand) == 10 for p in all_bots)

    def test_match_runs_to_the_target(self, bot_match, manual_loop, events):
        """Deals continue until a team reaches the target, then GameEnded."""
        bot_match.start_game()
        for _ in range(50):
            manual_loop.run_until_idle()
            if bot_match.is_game_over():
                break
            assert bot_match.start_next_deal()
        assert bot_match.is_game_over()
        assert isinstance(events[-1], GameEnded)
        assert isinstance(events[-2], ScoresUpdated)
        final = events[-1]
        assert max(final.final_scores.values()) >= 11
        assert list(final.winner_ids) == bot_match.winner_ids
        assert not bot_match.start_next_deal()


class TestPauseStop:
    """Pause propagates to the deal; stop freezes the match."""

    def test_pause_before_deal_applies_to_it(self, bot_match, manual_loop):
        """A new deal starts paused when the match is paused."""
        bot_match.pause_game()
        bot_match.start_game()
        assert bot_match.current_deal.is_paused
        assert manual_loop.pending == []
        bot_match.resume_game()
        assert len(manual_loop.pending) == 1

    def test_stop(self, bot_match, manual_loop):
        """Stopping cancels timers and blocks new deals."""
        bot_match.start_game()
        bot_match.stop_game()
        assert manual_loop.pending == []
        assert bot_match.is_game_over()
        assert not bot_match.start_next_deal()

    def test_can_player_make_sign(self, bot_match):
        """Only the leader of an empty trick may sign."""
        assert not bot_match.can_player_make_sign(bot_match.players[0])
        bot_match.start_game()
        leader = bot_match.current_player
        assert bot_match.can_player_make_sign(leader)
        others = [p for p in bot_match.players if p is not leader]
        assert not any(bot_match.can_player_make_sign(p) for p in others)
