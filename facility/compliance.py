from dataclasses import dataclass, field
from datetime import date as dt_date
from typing import List, Set
from core.state import CareHomeState
from utils.constants import DOCTOR_MIN_DAILY_HOURS, NURSE_MAX_DAILY_HOURS, NURSE_WINDOWS
from utils.shift_utils import describe_window, group_by_staff_and_date, matching_window

"""
Staffing compliance audit. Pure read over the shift ledger and the roster
indices: every calendar date that has at least one shift is checked, and all
violations are collected into one report.
"""

NURSE_DAILY_CAP = "NURSE_DAILY_CAP"
NURSE_COVERAGE = "NURSE_COVERAGE_{}"
DOCTOR_COVERAGE = "DOCTOR_COVERAGE"


@dataclass(frozen=True)
class ComplianceViolation:
    date: dt_date
    rule: str
    detail: str

    def __str__(self):
        return f"{self.date.isoformat()} [{self.rule}] {self.detail}"


@dataclass
class ComplianceReport:
    dates_checked: List[dt_date] = field(default_factory=list)
    violations: List[ComplianceViolation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    def rules_broken_on(self, day: dt_date) -> Set[str]:
        return {v.rule for v in self.violations if v.date == day}

    def describe(self) -> str:
        if self.passed:
            return f"Compliance check passed for {len(self.dates_checked)} day(s)."
        lines = [f"Compliance check FAILED ({len(self.violations)} violation(s)):"]
        lines += [f" • {v}" for v in self.violations]
        return "\n".join(lines)


def audit_compliance(state: CareHomeState) -> ComplianceReport:
    by_staff = group_by_staff_and_date(state.shifts)
    all_dates = sorted({d for daily in by_staff.values() for d in daily})
    report = ComplianceReport(dates_checked=all_dates)

    for day in all_dates:
        # Nurses: max 8h per day
        for nid in state.nurse_ids:
            total = sum(s.hours for s in by_staff.get(nid, {}).get(day, []))
            if total > NURSE_MAX_DAILY_HOURS:
                report.violations.append(
                    ComplianceViolation(
                        day,
                        NURSE_DAILY_CAP,
                        f"Nurse {nid} is scheduled {total:g}h (max {NURSE_MAX_DAILY_HOURS}h).",
                    )
                )

        # Nurse coverage: every canonical window held by at least one nurse
        covered = {
            matching_window(s)
            for nid in state.nurse_ids
            for s in by_staff.get(nid, {}).get(day, [])
        }
        for label in NURSE_WINDOWS:
            if label not in covered:
                report.violations.append(
                    ComplianceViolation(
                        day,
                        NURSE_COVERAGE.format(label),
                        f"Missing {label.lower()} nurse shift {describe_window(label)}.",
                    )
                )

        # Doctor coverage: cumulative doctor hours
        doctor_hours = sum(
            s.hours for did in state.doctor_ids for s in by_staff.get(did, {}).get(day, [])
        )
        if doctor_hours < DOCTOR_MIN_DAILY_HOURS:
            report.violations.append(
                ComplianceViolation(
                    day,
                    DOCTOR_COVERAGE,
                    f"Doctor coverage {doctor_hours:g}h (min {DOCTOR_MIN_DAILY_HOURS}h).",
                )
            )

    return report
