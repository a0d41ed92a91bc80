"""bgcheck - background check lookups over public profile data."""

from bgcheck.models.profile import Profile
from bgcheck.models.risk import RiskLevel, RiskResult, Requirements
from bgcheck.models.result import LookupResult, EvaluationResult, LookupOutcome
from bgcheck.config import CheckerConfig
from bgcheck.core.orchestrator import Checker
from bgcheck.core.scorer import ScoringPolicy, score_risk
from bgcheck.core.blacklist import BlacklistRepository
from bgcheck.core.exporter import to_json, to_dict, save_json, load_json

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "Checker",
    "CheckerConfig",
    # Scoring
    "ScoringPolicy",
    "score_risk",
    "BlacklistRepository",
    # Models
    "Profile",
    "RiskLevel",
    "RiskResult",
    "Requirements",
    "LookupResult",
    "EvaluationResult",
    "LookupOutcome",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "load_json",
    "__version__",
]
