# americano/models - Data models for the scheduling engine
from .config import GenerationMode, ScheduleConfig, effective_courts
from .rules import RULES, RulesConfig
from .schedule import (
    GeneratedRound,
    GeneratedSchedule,
    GenerationInfo,
    MatchAssignment,
    Team,
)
from .validated import ValidatedScheduleConfig

__all__ = [
    "ScheduleConfig", "GenerationMode", "effective_courts",
    "RULES", "RulesConfig",
    "MatchAssignment", "GeneratedRound", "GeneratedSchedule", "GenerationInfo", "Team",
    "ValidatedScheduleConfig",
]
