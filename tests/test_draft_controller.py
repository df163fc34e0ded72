"""Tests for draft controller - pick confirmation and state transitions."""

import pytest

from src.draft_manager.config import BACKWARD, FORWARD, ROSTER_SLOTS
from src.draft_manager.draft_controller import DraftController, PickOutcome, confirm_pick
from src.draft_manager.draft_rules import (
    DraftComplete,
    DuplicatePick,
    DuplicateTeam,
    NotYourTurn,
    RosterFull,
    StalePick,
    ValidationError,
)
from src.draft_manager.draft_state import Contestant, Draft, League, Player, RosterPlayer
from src.draft_manager.roster_validator import RosterValidator


# ── Helpers ──────────────────────────────────────────────────────────

# Position order each contestant drafts in; fills all 14 slots
DRAFT_PLAN = ["QB", "QB", "RB", "RB", "WR", "WR", "WR", "TE", "RB", "WR", "TE", "RB", "K", "DST"]


def _make_draft(order=("A", "B", "C"), rounds=14, **overrides):
    return Draft(
        draft_id="d1",
        league_id="lg1",
        order=list(order),
        size=len(order),
        rounds=rounds,
        **overrides,
    )


def _make_contestants(ids=("A", "B", "C")):
    return {
        cid: Contestant(cid, "lg1", f"user-{cid}", f"Team {cid}") for cid in ids
    }


def _make_player(pid, position="WR", team_id=None):
    team_id = team_id or f"T-{pid}"
    return Player(pid, f"Player {pid}", position, team_id, f"Team {team_id}")


def _make_roster_player(pid, position):
    return RosterPlayer(pid, f"Player {pid}", f"T-{pid}", "Team", position)


def _pick(controller, draft, contestants, player, **kwargs):
    """Confirm a pick for whoever is on the clock and store the results."""
    active = contestants[draft.active_contestant_id()]
    outcome = controller.confirm_pick(draft, active, player, **kwargs)
    contestants[active.contestant_id] = outcome.contestant
    return outcome


def _run_full_draft(ids=("A", "B"), rounds=len(DRAFT_PLAN)):
    """Draft every round; each contestant gets players from distinct teams."""
    controller = DraftController()
    draft = _make_draft(ids, rounds=rounds)
    contestants = _make_contestants(ids)
    outcomes = []
    while not draft.completed:
        cid = draft.active_contestant_id()
        n = len(contestants[cid].filled_slots())
        player = _make_player(f"{cid}-{n}", DRAFT_PLAN[n], team_id=f"{cid}-team-{n}")
        outcome = _pick(controller, draft, contestants, player)
        draft = outcome.draft
        outcomes.append(outcome)
    return draft, contestants, outcomes


# ── Confirm Pick (valid) ─────────────────────────────────────────────

class TestConfirmPickValid:
    def test_returns_outcome(self):
        outcome = DraftController().confirm_pick(
            _make_draft(), _make_contestants()["A"], _make_player("p1")
        )
        assert isinstance(outcome, PickOutcome)
        assert outcome.replayed is False
        assert outcome.league_drafted_now is False

    def test_writes_roster_slot(self):
        player = _make_player("p1", "RB", team_id="KC")
        outcome = DraftController().confirm_pick(
            _make_draft(), _make_contestants()["A"], player
        )
        rp = outcome.contestant.roster["rb1"]
        assert rp.player_id == "p1"
        assert rp.player_name == "Player p1"
        assert rp.team_id == "KC"
        assert rp.team_name == "Team KC"
        assert rp.position == "RB"
        assert outcome.contestant.filled_slots() == ["rb1"]

    def test_appends_result(self):
        outcome = DraftController().confirm_pick(
            _make_draft(), _make_contestants()["A"], _make_player("p1", "TE", "BUF")
        )
        assert len(outcome.draft.results) == 1
        result = outcome.draft.results[0]
        assert result is outcome.result
        assert result.pick_number == 1
        assert result.round == 1
        assert result.picking_team == "Team A"
        assert result.contestant_id == "A"
        assert result.player_id == "p1"
        assert result.position == "TE"
        assert result.team_id == "BUF"
        assert result.slot == "te1"

    def test_advances_clock(self):
        outcome = DraftController().confirm_pick(
            _make_draft(), _make_contestants()["A"], _make_player("p1")
        )
        draft = outcome.draft
        assert draft.overall_pick == 1
        assert (draft.current_round, draft.current_pick_in_round) == (1, 2)
        assert draft.active_contestant_id() == "B"

    def test_inputs_not_mutated(self):
        draft = _make_draft()
        contestant = _make_contestants()["A"]
        DraftController().confirm_pick(draft, contestant, _make_player("p1"))
        assert draft.results == []
        assert draft.overall_pick == 0
        assert draft.current_pick_in_round == 1
        assert contestant.filled_slots() == []

    def test_lowercase_position(self):
        outcome = confirm_pick(
            _make_draft(), _make_contestants()["A"], _make_player("p1", "dst")
        )
        assert outcome.contestant.roster["dst"] is not None

    def test_caller_user_id_accepted(self):
        outcome = confirm_pick(
            _make_draft(), _make_contestants()["A"], _make_player("p1"),
            caller_user_id="user-A",
        )
        assert outcome.result.player_id == "p1"


# ── Confirm Pick (rejected) ──────────────────────────────────────────

class TestConfirmPickRejected:
    def test_not_your_turn(self):
        with pytest.raises(NotYourTurn):
            confirm_pick(_make_draft(), _make_contestants()["B"], _make_player("p1"))

    def test_wrong_caller(self):
        with pytest.raises(NotYourTurn):
            confirm_pick(
                _make_draft(), _make_contestants()["A"], _make_player("p1"),
                caller_user_id="user-B",
            )

    def test_duplicate_pick(self):
        controller = DraftController()
        contestants = _make_contestants()
        first = _pick(controller, _make_draft(), contestants, _make_player("p1"))
        with pytest.raises(DuplicatePick):
            controller.confirm_pick(first.draft, contestants["B"], _make_player("p1"))

    def test_duplicate_team(self):
        controller = DraftController()
        contestants = _make_contestants(("A",))
        draft = _make_draft(("A",))
        first = _pick(controller, draft, contestants, _make_player("p1", "QB", "KC"))
        with pytest.raises(DuplicateTeam):
            controller.confirm_pick(
                first.draft, contestants["A"], _make_player("p2", "WR", "KC")
            )

    def test_roster_full(self):
        contestant = _make_contestants()["A"]
        contestant.roster["kicker"] = _make_roster_player("k0", "K")
        with pytest.raises(RosterFull):
            confirm_pick(_make_draft(), contestant, _make_player("k1", "K"))

    def test_missing_player_id(self):
        with pytest.raises(ValidationError, match="no id"):
            confirm_pick(_make_draft(), _make_contestants()["A"], _make_player(""))

    def test_draft_complete(self):
        with pytest.raises(DraftComplete):
            confirm_pick(
                _make_draft(completed=True, overall_pick=42),
                _make_contestants()["A"],
                _make_player("p1"),
            )

    def test_unknown_position(self):
        with pytest.raises(ValidationError, match="Unknown position"):
            confirm_pick(_make_draft(), _make_contestants()["A"], _make_player("p1", "LB"))

    def test_rejection_leaves_state_untouched(self):
        draft = _make_draft()
        contestant = _make_contestants()["B"]
        with pytest.raises(NotYourTurn):
            confirm_pick(draft, contestant, _make_player("p1"))
        assert draft.results == []
        assert contestant.filled_slots() == []


# ── Snake Order ──────────────────────────────────────────────────────

class TestSnakeOrder:
    def test_three_team_sequence(self):
        """order=[A,B,C]: A, B, C, then C opens round 2 going backward."""
        controller = DraftController()
        contestants = _make_contestants()
        draft = _make_draft()

        expected = [("A", 1, 2), ("B", 1, 3), ("C", 2, 1)]
        for i, (active, round_after, pick_after) in enumerate(expected):
            assert draft.active_contestant_id() == active
            draft = _pick(controller, draft, contestants, _make_player(f"p{i}")).draft
            assert (draft.current_round, draft.current_pick_in_round) == (
                round_after, pick_after,
            )

        assert draft.direction == BACKWARD
        assert draft.active_contestant_id() == "C"

    def test_one_round_visits_order_then_reverses(self):
        controller = DraftController()
        ids = ("A", "B", "C", "D")
        contestants = _make_contestants(ids)
        draft = _make_draft(ids)

        pickers = []
        for i in range(8):
            pickers.append(draft.active_contestant_id())
            draft = _pick(controller, draft, contestants, _make_player(f"p{i}")).draft

        assert pickers[:4] == list(ids)
        assert pickers[4:] == list(reversed(ids))
        assert draft.direction == FORWARD
        assert draft.current_round == 3

    def test_pick_numbers_are_sequential(self):
        _, _, outcomes = _run_full_draft(rounds=3)
        assert [o.result.pick_number for o in outcomes] == [1, 2, 3, 4, 5, 6]
        assert [o.result.round for o in outcomes] == [1, 1, 2, 2, 3, 3]


# ── Completion ───────────────────────────────────────────────────────

class TestCompletion:
    def test_two_teams_one_round(self):
        controller = DraftController()
        contestants = _make_contestants(("A", "B"))
        draft = _make_draft(("A", "B"), rounds=1)

        first = _pick(controller, draft, contestants, _make_player("p1"))
        assert first.draft.completed is False
        assert first.league_drafted_now is False

        second = _pick(controller, first.draft, contestants, _make_player("p2"))
        assert second.draft.completed is True
        assert second.league_drafted_now is True

    def test_no_picks_after_completion(self):
        controller = DraftController()
        contestants = _make_contestants(("A", "B"))
        draft = _make_draft(("A", "B"), rounds=1)
        draft = _pick(controller, draft, contestants, _make_player("p1")).draft
        draft = _pick(controller, draft, contestants, _make_player("p2")).draft

        with pytest.raises(DraftComplete):
            controller.confirm_pick(draft, contestants["B"], _make_player("p3"))

    def test_full_draft_fills_every_roster(self):
        draft, contestants, outcomes = _run_full_draft()
        assert len(draft.results) == 2 * len(ROSTER_SLOTS)
        assert draft.overall_pick == 2 * len(ROSTER_SLOTS)
        assert sum(o.league_drafted_now for o in outcomes) == 1
        assert outcomes[-1].league_drafted_now is True
        for c in contestants.values():
            assert c.open_slots() == []
            assert RosterValidator().validate_final_roster(c) == (True, [])

    def test_single_team_drafts_every_pick(self):
        draft, contestants, outcomes = _run_full_draft(ids=("A",))
        assert [r.contestant_id for r in draft.results] == ["A"] * len(ROSTER_SLOTS)
        assert [r.pick_number for r in draft.results] == list(range(1, len(ROSTER_SLOTS) + 1))
        assert contestants["A"].open_slots() == []
        assert outcomes[-1].league_drafted_now is True

    def test_full_draft_roster_matches_results(self):
        draft, contestants, _ = _run_full_draft()
        for cid, c in contestants.items():
            drafted = {r.player_id for r in draft.results if r.contestant_id == cid}
            assert drafted == c.rostered_player_ids()

    def test_apply_to_league(self):
        league = League("lg1", "L", 2, full=True)
        _, _, outcomes = _run_full_draft(rounds=1)
        assert DraftController.apply_to_league(league, outcomes[0]) is league
        drafted = DraftController.apply_to_league(league, outcomes[-1])
        assert drafted.drafted is True
        assert league.drafted is False


# ── Idempotent Retry ─────────────────────────────────────────────────

class TestPickKey:
    def test_retry_is_noop(self):
        controller = DraftController()
        contestant = _make_contestants()["A"]
        player = _make_player("p1")
        first = controller.confirm_pick(_make_draft(), contestant, player, pick_key=0)

        retry = controller.confirm_pick(
            first.draft, first.contestant, player, pick_key=0
        )
        assert retry.replayed is True
        assert len(retry.draft.results) == 1
        assert retry.draft.overall_pick == 1
        assert retry.result == first.result

    def test_retry_with_stale_client_state(self):
        """A retry may carry the pre-pick contestant; still no double append."""
        controller = DraftController()
        contestant = _make_contestants()["A"]
        player = _make_player("p1")
        first = controller.confirm_pick(_make_draft(), contestant, player, pick_key=0)

        retry = controller.confirm_pick(first.draft, contestant, player, pick_key=0)
        assert retry.replayed is True
        assert retry.draft.results == first.draft.results

    def test_different_player_same_key_is_stale(self):
        controller = DraftController()
        contestant = _make_contestants()["A"]
        first = controller.confirm_pick(
            _make_draft(), contestant, _make_player("p1"), pick_key=0
        )
        with pytest.raises(StalePick):
            controller.confirm_pick(
                first.draft, first.contestant, _make_player("p2"), pick_key=0
            )

    def test_key_ahead_of_draft_is_stale(self):
        with pytest.raises(StalePick):
            confirm_pick(
                _make_draft(), _make_contestants()["A"], _make_player("p1"), pick_key=3
            )

    def test_current_key_picks_normally(self):
        outcome = confirm_pick(
            _make_draft(), _make_contestants()["A"], _make_player("p1"), pick_key=0
        )
        assert outcome.replayed is False
        assert outcome.draft.overall_pick == 1
