"""Rolling activity scores for the Brain Command Deck.

``brain_power`` and the category bars are a presentation heuristic, not
a measured quantity. The weights may be tuned, but every score is
clamped to 0..100 and more recent events never lower a count-based
score. The cost bar follows the last five cost logs, so a new cheap run
can lower it.
"""

from collections import Counter
from dataclasses import dataclass, field

from .models import BrainLog, LiveSession, LogType
from .sessions import sort_logs

RECENT_WINDOW_MS = 60_000
VERY_RECENT_WINDOW_MS = 5_000
COST_SAMPLE_SIZE = 5

# brain_power weights
TOOL_CALL_WEIGHT = 8
THINKING_WEIGHT = 10
RESPONSE_WEIGHT = 5
VERY_RECENT_WEIGHT = 15
ACTIVE_THINKING_BONUS = 30

# Bar key -> (label, scale factor)
BAR_SCALES: dict[str, tuple[str, float]] = {
    "tool_calls": ("Tool Calls", 15),
    "thinking": ("Thinking", 20),
    "responses": ("Responses", 15),
    "mcp": ("MCP", 20),
    "errors": ("Errors", 50),
    "cost": ("Cost", 5000),
    "sessions": ("Sessions", 33),
}


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    """Saturate a value into [low, high]."""
    return max(low, min(high, value))


def window(logs: list[BrainLog], now: int, width_ms: int) -> list[BrainLog]:
    """Logs younger than ``width_ms`` relative to ``now``."""
    return [log for log in logs if now - log.timestamp < width_ms]


def count_by_type(logs: list[BrainLog]) -> dict[LogType, int]:
    """Count logs per log type."""
    return dict(Counter(log.log_type for log in logs))


def recent_cost(logs: list[BrainLog], sample: int = COST_SAMPLE_SIZE) -> tuple[float, float]:
    """Sum cost and turns over the last ``sample`` cost logs.

    Returns:
        Tuple of (cost in USD, turns).
    """
    cost_logs = [log for log in sort_logs(logs) if log.log_type == LogType.COST]
    last = cost_logs[-sample:] if sample > 0 else []
    return (
        sum(log.cost_usd for log in last),
        sum(log.turns for log in last),
    )


@dataclass
class ActivityBar:
    """One bounded meter on the command deck."""

    key: str
    label: str
    value: float

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "value": self.value}


@dataclass
class ActivityReport:
    """Aggregated activity over the rolling windows."""

    recent_logs: list[BrainLog]
    very_recent_logs: list[BrainLog]
    counts: dict[LogType, int]
    recent_cost: float
    total_turns: float
    is_actively_thinking: bool
    active_session_count: int
    brain_power: float
    bars: list[ActivityBar] = field(default_factory=list)

    def count(self, log_type: LogType) -> int:
        return self.counts.get(log_type, 0)

    def bar(self, key: str) -> ActivityBar:
        for bar in self.bars:
            if bar.key == key:
                return bar
        raise KeyError(key)

    def to_dict(self) -> dict:
        return {
            "recentCount": len(self.recent_logs),
            "veryRecentCount": len(self.very_recent_logs),
            "counts": {t.value: n for t, n in self.counts.items()},
            "recentCost": self.recent_cost,
            "totalTurns": self.total_turns,
            "isActivelyThinking": self.is_actively_thinking,
            "activeSessionCount": self.active_session_count,
            "brainPower": self.brain_power,
            "bars": [b.to_dict() for b in self.bars],
        }


def compute_brain_power(
    counts: dict[LogType, int], very_recent: int, actively_thinking: bool
) -> float:
    """Composite 0..100 activity score."""
    score = (
        TOOL_CALL_WEIGHT * counts.get(LogType.TOOL_CALL, 0)
        + THINKING_WEIGHT * counts.get(LogType.THINKING, 0)
        + RESPONSE_WEIGHT * counts.get(LogType.RESPONSE, 0)
        + VERY_RECENT_WEIGHT * very_recent
        + (ACTIVE_THINKING_BONUS if actively_thinking else 0)
    )
    return clamp(score)


def compute_activity(
    logs: list[BrainLog] | None,
    sessions: list[LiveSession] | None,
    now: int,
) -> ActivityReport:
    """Aggregate a snapshot's logs and sessions into the command deck report."""
    logs = logs or []
    sessions = sessions or []

    recent = window(logs, now, RECENT_WINDOW_MS)
    very_recent = window(recent, now, VERY_RECENT_WINDOW_MS)
    counts = count_by_type(recent)
    cost, turns = recent_cost(logs)

    active_session_count = sum(1 for s in sessions if s.status.is_busy())
    actively_thinking = active_session_count > 0
    brain_power = compute_brain_power(counts, len(very_recent), actively_thinking)

    raw = {
        "tool_calls": counts.get(LogType.TOOL_CALL, 0),
        "thinking": counts.get(LogType.THINKING, 0),
        "responses": counts.get(LogType.RESPONSE, 0),
        "mcp": counts.get(LogType.MCP, 0),
        "errors": counts.get(LogType.ERROR, 0),
        "cost": cost,
        "sessions": active_session_count,
    }
    bars = [
        ActivityBar(key=key, label=label, value=clamp(raw[key] * scale))
        for key, (label, scale) in BAR_SCALES.items()
    ]
    bars.append(ActivityBar(key="brain_power", label="Brain Power", value=brain_power))

    return ActivityReport(
        recent_logs=recent,
        very_recent_logs=very_recent,
        counts=counts,
        recent_cost=cost,
        total_turns=turns,
        is_actively_thinking=actively_thinking,
        active_session_count=active_session_count,
        brain_power=brain_power,
        bars=bars,
    )
