"""Resolution ledger: the human-edited issue table round-tripped between runs.

A first pass exports one row per issue (one row per candidate for ambiguous
matches) with the action columns blank. A reviewer fills in the actions and
the table is read back as a ``ResolutionLedger`` on the next run. Building a
ledger validates every row; any violation is fatal.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.domain.model import LEGAL_ACTIONS, Action, Issue, IssueType, Resolution

from .errors import (
    ChainedReplaceError,
    DuplicateSelectionError,
    InvalidActionError,
    LedgerFormatError,
    UnknownActionTargetError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

log = getLogger(__name__)

LEDGER_HEADER: tuple[str, ...] = (
    "Issue ID",
    "Issue Type",
    "Resource Address",
    "Resource Name",
    "Resource Type",
    "Resource Sub Type",
    "Resource Location",
    "Mapped Resource ID",
    "Action",
    "Action ID",
)


@dataclass(frozen=True, slots=True, kw_only=True)
class LedgerRow:
    """One ledger row with raw string cells, in header order."""

    issue_id: str
    issue_type: str
    resource_address: str = ""
    resource_name: str = ""
    resource_type: str = ""
    resource_sub_type: str = ""
    resource_location: str = ""
    mapped_resource_id: str = ""
    action: str = ""
    action_id: str = ""

    def cells(self) -> tuple[str, ...]:
        return (
            self.issue_id,
            self.issue_type,
            self.resource_address,
            self.resource_name,
            self.resource_type,
            self.resource_sub_type,
            self.resource_location,
            self.mapped_resource_id,
            self.action,
            self.action_id,
        )

    @classmethod
    def from_cells(cls, cells: Sequence[str]) -> LedgerRow:
        if len(cells) != len(LEDGER_HEADER):
            raise LedgerFormatError(f"Malformed ledger row: {list(cells)}")
        return cls(
            issue_id=cells[0].strip(),
            issue_type=cells[1].strip(),
            resource_address=cells[2],
            resource_name=cells[3],
            resource_type=cells[4],
            resource_sub_type=cells[5],
            resource_location=cells[6],
            mapped_resource_id=cells[7].strip(),
            action=cells[8].strip(),
            action_id=cells[9].strip(),
        )

    def sort_key(self) -> tuple[str, str, str, str, str]:
        return (
            self.issue_type,
            self.resource_type,
            self.resource_sub_type,
            self.resource_address,
            self.mapped_resource_id,
        )


def ledger_rows(issues: Mapping[str, Issue]) -> list[LedgerRow]:
    """Fan issues out into deterministically sorted ledger rows.

    Action columns carry the issue's resolution when it has one, so a
    resolved ledger re-exports unchanged.
    """

    rows: list[LedgerRow] = []
    for issue_id, issue in issues.items():
        if issue.issue_type is IssueType.MULTIPLE_RESOURCE_IDS:
            rows.extend(
                _row_for(issue_id, issue, mapped_resource_id=candidate_id)
                for candidate_id in issue.candidate_ids
            )
        else:
            rows.append(_row_for(issue_id, issue, mapped_resource_id=""))
    rows.sort(key=LedgerRow.sort_key)
    return rows


def _row_for(issue_id: str, issue: Issue, *, mapped_resource_id: str) -> LedgerRow:
    action = ""
    action_id = ""
    resolution = issue.resolution
    if resolution is not None:
        action_id = resolution.action_id
        action = resolution.action.value
        if issue.issue_type is IssueType.MULTIPLE_RESOURCE_IDS:
            chosen = resolution.action is Action.USE and resolution.selected_id == mapped_resource_id
            action = Action.USE.value if chosen else Action.IGNORE.value
    return LedgerRow(
        issue_id=issue_id,
        issue_type=issue.issue_type.value,
        resource_address=issue.resource_address,
        resource_name=issue.resource_name,
        resource_type=issue.resource_type,
        resource_sub_type=issue.resource_sub_type,
        resource_location=issue.resource_location,
        mapped_resource_id=mapped_resource_id,
        action=action,
        action_id=action_id,
    )


@dataclass(slots=True)
class ResolutionLedger:
    """Validated mapping from issue identity to a resolved issue."""

    issues: dict[str, Issue] = field(default_factory=dict[str, Issue])

    def __len__(self) -> int:
        return len(self.issues)

    def __contains__(self, issue_id: object) -> bool:
        return issue_id in self.issues

    def get(self, issue_id: str) -> Issue | None:
        return self.issues.get(issue_id)

    def resolved_resource_id(self, issue_id: str) -> str | None:
        """Return the observed resource ID that ``issue_id`` was resolved to, if any."""

        issue = self.issues.get(issue_id)
        if issue is None or issue.resolution is None:
            return None
        resolution = issue.resolution
        if issue.issue_type is IssueType.UNUSED_RESOURCE_ID:
            return issue.resource_address
        if issue.issue_type is IssueType.MULTIPLE_RESOURCE_IDS and resolution.action is Action.USE:
            return resolution.selected_id
        return None

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> ResolutionLedger:
        ledger = cls({issue.issue_id: issue for issue in issues})
        ledger.validate()
        return ledger

    @classmethod
    def from_rows(cls, rows: Iterable[LedgerRow]) -> ResolutionLedger:
        rows_by_issue: dict[str, list[LedgerRow]] = defaultdict(list)
        for row in rows:
            if not row.issue_id:
                raise LedgerFormatError(f"Ledger row without an Issue ID: {list(row.cells())}")
            rows_by_issue[row.issue_id].append(row)

        known_ids = frozenset(rows_by_issue)
        issues = [
            _issue_from_rows(issue_id, issue_rows, known_ids=known_ids)
            for issue_id, issue_rows in rows_by_issue.items()
        ]
        return cls.from_issues(issues)

    def validate(self) -> None:
        """Check cross-issue references: one hop, to an issue with a resolved resource."""

        for issue_id, issue in self.issues.items():
            resolution = issue.resolution
            if resolution is None:
                raise InvalidActionError(f"Issue {issue_id} has no resolution", issue_id=issue_id)
            _require_legal(issue.issue_type, resolution.action, issue_id=issue_id)
            if resolution.action is not Action.REPLACE or not resolution.action_id:
                continue

            target = self.issues.get(resolution.action_id)
            if target is None:
                raise UnknownActionTargetError(
                    f"Action ID {resolution.action_id} not found in ledger for Issue ID: {issue_id}",
                    issue_id=issue_id,
                    action_id=resolution.action_id,
                )
            target_resolution = target.resolution
            if (
                target_resolution is not None
                and target_resolution.action is Action.REPLACE
                and target_resolution.action_id
            ):
                raise ChainedReplaceError(
                    f"Issue {issue_id} replaces {resolution.action_id}, which itself replaces "
                    f"{target_resolution.action_id}; only direct references are supported"
                )
            if not self.resolved_resource_id(resolution.action_id):
                raise UnknownActionTargetError(
                    f"Action ID {resolution.action_id} for Issue ID {issue_id} does not resolve "
                    "to an observed resource",
                    issue_id=issue_id,
                    action_id=resolution.action_id,
                )


def _issue_from_rows(
    issue_id: str,
    rows: Sequence[LedgerRow],
    *,
    known_ids: frozenset[str],
) -> Issue:
    first = rows[0]
    issue_type = _parse_issue_type(first.issue_type, issue_id=issue_id)
    if any(row.issue_type != first.issue_type for row in rows):
        raise LedgerFormatError(f"Conflicting Issue Types for Issue ID: {issue_id}")
    actions = [_parse_action(row.action, issue_id=issue_id) for row in rows]
    for action in actions:
        _require_legal(issue_type, action, issue_id=issue_id)

    issue = Issue(
        issue_id=issue_id,
        issue_type=issue_type,
        resource_address=first.resource_address,
        resource_name=first.resource_name,
        resource_type=first.resource_type,
        resource_sub_type=first.resource_sub_type,
        resource_location=first.resource_location,
    )

    if issue_type is IssueType.MULTIPLE_RESOURCE_IDS:
        issue.candidate_ids = [row.mapped_resource_id for row in rows]
        issue.resolution = _multiple_resolution(issue_id, rows, actions)
        return issue

    if len(rows) > 1:
        raise LedgerFormatError(f"Duplicate rows for Issue ID: {issue_id}")
    action = actions[0]
    if issue_type is IssueType.UNUSED_RESOURCE_ID:
        issue.candidate_ids = [first.resource_address]
    if issue_type is IssueType.NO_RESOURCE_ID and action is Action.REPLACE:
        issue.resolution = Resolution(
            action=action,
            action_id=_require_action_id(first, known_ids=known_ids),
        )
    else:
        issue.resolution = Resolution(action=action)
    log.debug(f"Ledger resolution for Issue ID {issue_id}: {action}")
    return issue


def _multiple_resolution(
    issue_id: str,
    rows: Sequence[LedgerRow],
    actions: Sequence[Action],
) -> Resolution:
    selected = [row for row, action in zip(rows, actions, strict=True) if action is Action.USE]
    if len(selected) > 1:
        raise DuplicateSelectionError(f"Duplicate Use Action found for Issue ID {issue_id}")
    if not selected:
        log.debug(f"Ignoring Issue ID: {issue_id}, no candidate selected")
        return Resolution(action=Action.IGNORE)
    chosen = selected[0].mapped_resource_id
    if not chosen:
        raise InvalidActionError(
            f"Use Action without a Mapped Resource ID for Issue ID: {issue_id}",
            issue_id=issue_id,
        )
    return Resolution(action=Action.USE, selected_id=chosen)


def _require_action_id(row: LedgerRow, *, known_ids: frozenset[str]) -> str:
    if not row.action_id:
        raise InvalidActionError(
            f"Action ID is missing for Issue ID: {row.issue_id}, Action: {row.action}",
            issue_id=row.issue_id,
        )
    if row.action_id == row.issue_id:
        raise ChainedReplaceError(f"Issue ID {row.issue_id} cannot replace itself")
    if row.action_id not in known_ids:
        raise UnknownActionTargetError(
            f"Action ID {row.action_id} not found in ledger for Issue ID: {row.issue_id}",
            issue_id=row.issue_id,
            action_id=row.action_id,
        )
    return row.action_id


def _parse_issue_type(value: str, *, issue_id: str) -> IssueType:
    try:
        return IssueType(value)
    except ValueError:
        raise LedgerFormatError(f"Invalid Issue Type: {value!r} for Issue ID: {issue_id}") from None


def _parse_action(value: str, *, issue_id: str) -> Action:
    try:
        return Action(value)
    except ValueError:
        raise InvalidActionError(
            f"Action is missing or malformed for Issue ID: {issue_id}, Action: {value!r}",
            issue_id=issue_id,
        ) from None


def _require_legal(issue_type: IssueType, action: Action, *, issue_id: str) -> None:
    allowed = LEGAL_ACTIONS[issue_type]
    if action in allowed:
        return
    allowed_list = ", ".join(sorted(allowed))
    raise InvalidActionError(
        f"Action for {issue_type} must be one of {allowed_list} for Issue ID: {issue_id}, "
        f"Action: {action}",
        issue_id=issue_id,
    )
