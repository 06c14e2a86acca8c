from ._cancel import CancellationToken
from .config import ConfigError, RunSettings, parse_percentiles, resolve_settings
from .results import TRANSPORT_ERROR, AggregateRow, Outcome, OutcomeKind, SessionResult, StatAccumulator, StatRecord
from .runner import run_deadline, run_once
from .session import run_session
from .stats import aggregate, merge, percentile
from .worker import run_worker

__all__ = [
    "CancellationToken",
    "ConfigError",
    "RunSettings",
    "parse_percentiles",
    "resolve_settings",
    "Outcome",
    "OutcomeKind",
    "TRANSPORT_ERROR",
    "StatRecord",
    "StatAccumulator",
    "AggregateRow",
    "SessionResult",
    "merge",
    "percentile",
    "aggregate",
    "run_worker",
    "run_deadline",
    "run_once",
    "run_session",
]
