"""Commit history helpers for the changelog and contributions pages."""

import re
from dataclasses import dataclass, field
from datetime import date

from .models import GitCommit, GitContribution

COMMIT_PATTERN = re.compile(r"^(\w+)(?:\([^)]+\))?:\s*(.+)", re.DOTALL)

COMMIT_TYPE_CLASSES = {
    "feat": "badge-green",
    "fix": "badge-red",
    "docs": "badge-blue",
    "refactor": "badge-purple",
    "chore": "badge-muted",
    "style": "badge-pink",
    "test": "badge-amber",
    "perf": "badge-cyan",
}

EMPTY_LEVEL = -1


def parse_commit_type(message: str) -> tuple[str, str]:
    """Split a conventional commit message into (type, description).

    ``"feat(ui): add graph"`` gives ``("feat", "add graph")``; anything
    else is typed ``"commit"`` and keeps its full message.
    """
    match = COMMIT_PATTERN.match(message)
    if not match:
        return "commit", message
    return match.group(1), match.group(2)


@dataclass
class CommitEntry:
    commit: GitCommit
    type: str
    description: str

    @property
    def css_class(self) -> str:
        return COMMIT_TYPE_CLASSES.get(self.type, "badge-muted")


def changelog_entries(commits: list[GitCommit]) -> list[CommitEntry]:
    """Typed changelog entries, in the order the agent reported them."""
    entries = []
    for commit in commits:
        commit_type, description = parse_commit_type(commit.message)
        entries.append(CommitEntry(commit=commit, type=commit_type, description=description))
    return entries


def intensity_level(count: int, max_count: int) -> int:
    """Map a day's commit count to a colour level 0..4 (-1 for padding)."""
    if count < 0:
        return EMPTY_LEVEL
    if count == 0:
        return 0
    intensity = min(count / max(max_count, 1), 1)
    if intensity <= 0.25:
        return 1
    if intensity <= 0.5:
        return 2
    if intensity <= 0.75:
        return 3
    return 4


@dataclass
class GraphCell:
    date: str  # empty for padding cells
    count: int
    level: int


@dataclass
class MonthLabel:
    label: str
    column: int


@dataclass
class ContributionGraph:
    """Week columns (Sunday first) of daily contribution cells."""

    weeks: list[list[GraphCell]] = field(default_factory=list)
    months: list[MonthLabel] = field(default_factory=list)
    total_commits: int = 0
    active_days: int = 0


def _parse_day(value: str) -> date | None:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def build_contribution_graph(contributions: list[GitContribution]) -> ContributionGraph:
    """Lay out daily contributions as a calendar heat map."""
    graph = ContributionGraph(
        total_commits=sum(c.count for c in contributions),
        active_days=sum(1 for c in contributions if c.count > 0),
    )
    if not contributions:
        return graph

    max_count = max([c.count for c in contributions] + [1])

    week: list[GraphCell] = []
    first_day = _parse_day(contributions[0].date)
    if first_day is not None:
        # weekday() is Monday=0; columns start on Sunday
        for _ in range((first_day.weekday() + 1) % 7):
            week.append(GraphCell(date="", count=EMPTY_LEVEL, level=EMPTY_LEVEL))

    for c in contributions:
        week.append(GraphCell(date=c.date, count=c.count, level=intensity_level(c.count, max_count)))
        if len(week) == 7:
            graph.weeks.append(week)
            week = []
    if week:
        graph.weeks.append(week)

    last_month = None
    for column, cells in enumerate(graph.weeks):
        first_valid = next((cell for cell in cells if cell.date), None)
        day = _parse_day(first_valid.date) if first_valid else None
        if day is None:
            continue
        label = day.strftime("%b")
        if label != last_month:
            graph.months.append(MonthLabel(label=label, column=column))
            last_month = label
    return graph
