"""Tests for data models."""
import pytest
from pydantic import ValidationError

from americano.models.config import GenerationMode, ScheduleConfig, effective_courts
from americano.models.rules import MONTE_CARLO_DEFAULT_ITERATIONS, RULES
from americano.models.schedule import (
    GeneratedRound,
    GeneratedSchedule,
    GenerationInfo,
    MatchAssignment,
)
from americano.models.validated import ValidatedScheduleConfig


class TestMatchAssignment:
    """Tests for MatchAssignment."""

    def test_team_lookup(self):
        """Test team, partner and opponent lookup."""
        m = MatchAssignment(court_index=0, team1=("A", "B"), team2=("C", "D"))

        assert m.players == ["A", "B", "C", "D"]
        assert m.team_of("C") == 2
        assert m.team_of("X") is None
        assert m.partner_of("B") == "A"
        assert m.opponents_of("A") == ("C", "D")
        assert m.opponents_of("X") is None

    def test_teams_need_two_players(self):
        """Test a team of three is rejected."""
        with pytest.raises(ValueError, match="team1"):
            MatchAssignment(court_index=0, team1=("A", "B", "C"), team2=("D", "E"))

    def test_lists_become_tuples(self):
        """Test teams read from JSON lists are stored as tuples."""
        m = MatchAssignment.from_dict({"courtIndex": 1, "team1": ["A", "B"], "team2": ["C", "D"]})

        assert m.team1 == ("A", "B")
        assert m.court_index == 1

    def test_to_dict_omits_missing_scores(self):
        """Test scores appear only once entered."""
        m = MatchAssignment(court_index=0, team1=("A", "B"), team2=("C", "D"))

        assert m.to_dict() == {"courtIndex": 0, "team1": ["A", "B"], "team2": ["C", "D"]}

        m.score1, m.score2 = 21, 17
        assert m.to_dict()["score1"] == 21

    def test_from_dict_malformed(self):
        """Test malformed teams raise ValueError."""
        with pytest.raises(ValueError):
            MatchAssignment.from_dict({"courtIndex": 0, "team1": ["A"], "team2": ["C", "D"]})

    def test_repr(self):
        """Test courts are shown 1-based."""
        m = MatchAssignment(court_index=0, team1=("A", "B"), team2=("C", "D"))

        assert repr(m) == "Court 1: A & B vs C & D"


class TestGeneratedSchedule:
    """Tests for GeneratedSchedule."""

    @pytest.fixture
    def schedule(self, first_round):
        second = GeneratedRound(
            round_number=2,
            matches=[MatchAssignment(0, ("P1", "P3"), ("P5", "P7"))],
            paused_player_ids=["P2", "P4", "P6", "P8"],
        )
        info = GenerationInfo(
            method="montecarlo",
            iterations=200,
            use_optimal=True,
            optimal_disabled_reason=None,
            budget_exhausted_count=0,
            total_backtrack_calls=1234,
            elapsed_ms=87,
        )
        return GeneratedSchedule(rounds=[first_round, second], info=info)

    def test_to_dict_shape(self, schedule):
        """Test external camelCase field names."""
        d = schedule.to_dict()

        assert d["rounds"][0]["roundNumber"] == 1
        assert d["rounds"][1]["pausedPlayerIds"] == ["P2", "P4", "P6", "P8"]
        assert d["rounds"][0]["matches"][0]["courtIndex"] == 0
        assert d["info"]["useOptimal"] is True
        assert d["info"]["totalBacktrackCalls"] == 1234
        assert d["info"]["stoppedEarly"] is False

    def test_from_dict(self, schedule):
        """Test a stored schedule is read back."""
        restored = GeneratedSchedule.from_dict(schedule.to_dict())

        assert restored.total_rounds == 2
        assert restored.get_round(2).matches[0].team2 == ("P5", "P7")
        assert restored.info == schedule.info

    def test_without_info(self, first_round):
        """Test info is optional."""
        d = GeneratedSchedule(rounds=[first_round]).to_dict()

        assert "info" not in d
        assert GeneratedSchedule.from_dict(d).info is None

    def test_get_round_missing(self, schedule):
        assert schedule.get_round(9) is None

    def test_to_dataframe(self, schedule):
        """Test one row per player per round."""
        df = schedule.to_dataframe()

        assert len(df) == 16
        assert list(df.columns) == ["round", "player", "status", "court", "team", "partner", "opponents"]
        row = df[(df["round"] == 2) & (df["player"] == "P1")].iloc[0]
        assert row["status"] == "play"
        assert row["partner"] == "P3"
        assert row["opponents"] == "P5 & P7"
        assert (df[df["round"] == 2]["status"] == "pause").sum() == 4

    def test_empty_dataframe(self):
        """Test an empty schedule still has the columns."""
        df = GeneratedSchedule().to_dataframe()

        assert df.empty
        assert "status" in df.columns


class TestScheduleConfig:
    """Tests for ScheduleConfig."""

    def test_effective_courts(self):
        """Test courts are capped by roster size."""
        assert effective_courts(9, 4) == 2
        assert effective_courts(8, 1) == 1
        assert effective_courts(3, 2) == 0

    def test_derived_counts(self):
        config = ScheduleConfig(player_ids=[f"P{i}" for i in range(10)], courts=3, total_rounds=5)

        assert config.effective_courts == 2
        assert config.active_players == 8
        assert config.paused_per_round == 2

    def test_dict_round_trip(self):
        config = ScheduleConfig(player_ids=["A", "B", "C", "D"], courts=1, total_rounds=3)

        assert config.to_dict() == {"playerIds": ["A", "B", "C", "D"], "courts": 1, "totalRounds": 3}
        assert ScheduleConfig.from_dict(config.to_dict()) == config

    def test_with_players(self):
        """Test reordering keeps courts and rounds."""
        config = ScheduleConfig(player_ids=["A", "B", "C", "D"], courts=1, total_rounds=3)

        reordered = config.with_players(["D", "C", "B", "A"])

        assert reordered.player_ids == ["D", "C", "B", "A"]
        assert reordered.total_rounds == 3
        assert config.player_ids == ["A", "B", "C", "D"]

    def test_generation_mode(self):
        assert GenerationMode("montecarlo") == GenerationMode.MONTE_CARLO
        assert GenerationMode.GREEDY.value == "greedy"


class TestValidatedScheduleConfig:
    """Tests for the pydantic boundary model."""

    def test_valid(self):
        """Test a valid config converts to the dataclass."""
        v = ValidatedScheduleConfig(player_ids=[" Ann", "Bob ", "Cid", "Dee", "Eve"], courts=2, total_rounds=8)

        config = v.to_dataclass()

        assert config.player_ids == ["Ann", "Bob", "Cid", "Dee", "Eve"]
        assert config.courts == 2
        assert v.effective_courts == 1

    def test_defaults(self):
        v = ValidatedScheduleConfig(player_ids=["A", "B", "C", "D"])

        assert v.courts == RULES.default_courts
        assert v.total_rounds == RULES.default_rounds
        assert v.iterations == MONTE_CARLO_DEFAULT_ITERATIONS

    def test_too_few_players(self):
        with pytest.raises(ValidationError):
            ValidatedScheduleConfig(player_ids=["A", "B", "C"])

    def test_too_many_players(self):
        with pytest.raises(ValidationError):
            ValidatedScheduleConfig(player_ids=[f"P{i}" for i in range(21)])

    def test_duplicates(self):
        with pytest.raises(ValidationError, match="duplicate player ids: A"):
            ValidatedScheduleConfig(player_ids=["A", "B", "A", "C"])

    def test_blank(self):
        with pytest.raises(ValidationError, match="blank"):
            ValidatedScheduleConfig(player_ids=["A", "B", " ", "C"])

    @pytest.mark.parametrize("courts", [0, 5])
    def test_courts_bounds(self, courts):
        with pytest.raises(ValidationError):
            ValidatedScheduleConfig(player_ids=["A", "B", "C", "D"], courts=courts)

    @pytest.mark.parametrize("rounds", [0, 31])
    def test_rounds_bounds(self, rounds):
        with pytest.raises(ValidationError):
            ValidatedScheduleConfig(player_ids=["A", "B", "C", "D"], total_rounds=rounds)

    @pytest.mark.parametrize("iterations", [0, -5, 9, 1001])
    def test_iterations_bounds(self, iterations):
        with pytest.raises(ValidationError):
            ValidatedScheduleConfig(player_ids=["A", "B", "C", "D"], iterations=iterations)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            ValidatedScheduleConfig(player_ids=["A"])

    def test_assignment_validated(self):
        """Test fields are re-validated on assignment."""
        v = ValidatedScheduleConfig(player_ids=["A", "B", "C", "D"])

        with pytest.raises(ValidationError):
            v.courts = 9

    def test_from_dataclass(self):
        config = ScheduleConfig(player_ids=["A", "B", "C", "D"], courts=1, total_rounds=4)

        assert ValidatedScheduleConfig.from_dataclass(config).to_dataclass() == config
