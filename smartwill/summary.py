"""
Summary Module

Builds the distribution overview shown on the dashboard and review views:
how much of the estate is allocated, who is verified, which release
conditions are active, and the risk warnings the owner should see before
submitting a will for review.

All summaries are generated deterministically from the will data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

from smartwill.models import WillData
from smartwill.utils import format_percentage


class RiskLevel(str, Enum):
    """Risk severity levels for warnings."""
    INFO = 'info'
    WARNING = 'warning'
    CRITICAL = 'critical'


class AllocationStatus(str, Enum):
    EMPTY = 'empty'
    UNDER_ALLOCATED = 'under_allocated'
    COMPLETE = 'complete'
    OVER_ALLOCATED = 'over_allocated'


@dataclass
class RiskWarning:
    """A risk warning for the will owner."""
    level: RiskLevel
    category: str
    title: str
    message: str


@dataclass
class WillSummary:
    """Distribution overview of a will."""
    beneficiary_count: int = 0
    verified_count: int = 0
    total_percentage: float = 0
    unallocated_percentage: float = 100
    allocation_status: AllocationStatus = AllocationStatus.EMPTY
    active_condition_count: int = 0
    total_value: str = '$0'
    warnings: List[RiskWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for API response."""
        return {
            'key_facts': {
                'beneficiary_count': self.beneficiary_count,
                'verified_count': self.verified_count,
                'active_condition_count': self.active_condition_count,
                'total_value': self.total_value,
            },
            'allocation': {
                'total_percentage': self.total_percentage,
                'unallocated_percentage': self.unallocated_percentage,
                'status': self.allocation_status.value,
            },
            'warnings': [
                {
                    'level': w.level.value,
                    'category': w.category,
                    'title': w.title,
                    'message': w.message,
                }
                for w in self.warnings
            ],
            'warning_counts': {
                'info': len([w for w in self.warnings if w.level == RiskLevel.INFO]),
                'warning': len([w for w in self.warnings if w.level == RiskLevel.WARNING]),
                'critical': len([w for w in self.warnings if w.level == RiskLevel.CRITICAL]),
            }
        }


def _allocation_status(will: WillData, total: float) -> AllocationStatus:
    if not will.beneficiaries:
        return AllocationStatus.EMPTY
    if total > 100:
        return AllocationStatus.OVER_ALLOCATED
    if total < 100:
        return AllocationStatus.UNDER_ALLOCATED
    return AllocationStatus.COMPLETE


def generate_will_summary(will: Union[WillData, Dict[str, Any]]) -> WillSummary:
    """
    Summarize the distribution of a will.

    Args:
        will: WillData, or a wire dict that has already passed validation

    Returns:
        WillSummary with allocation facts and risk warnings
    """
    if isinstance(will, dict):
        will = WillData.from_dict(will)

    # Shares like 33.3 + 66.7 must count as complete
    total = round(will.total_percentage(), 6)
    summary = WillSummary(
        beneficiary_count=len(will.beneficiaries),
        verified_count=len([b for b in will.beneficiaries if b.verified]),
        total_percentage=total,
        unallocated_percentage=max(0, 100 - total),
        allocation_status=_allocation_status(will, total),
        active_condition_count=len(will.active_conditions()),
        total_value=will.assets.total_value,
    )
    summary.warnings = _generate_risk_warnings(will, summary)
    return summary


def _generate_risk_warnings(will: WillData, summary: WillSummary) -> List[RiskWarning]:
    warnings = []

    if summary.allocation_status == AllocationStatus.EMPTY:
        warnings.append(RiskWarning(
            level=RiskLevel.CRITICAL,
            category='distribution',
            title='No Beneficiaries',
            message='Your will does not name anyone to receive your estate.'
        ))
    elif summary.allocation_status == AllocationStatus.OVER_ALLOCATED:
        warnings.append(RiskWarning(
            level=RiskLevel.CRITICAL,
            category='distribution',
            title='Estate Over-Allocated',
            message=f'Beneficiary shares add up to {format_percentage(summary.total_percentage)}. '
                    f'Reduce them to a total of 100% before submitting for review.'
        ))
    elif summary.allocation_status == AllocationStatus.UNDER_ALLOCATED:
        warnings.append(RiskWarning(
            level=RiskLevel.WARNING,
            category='distribution',
            title='Unallocated Share',
            message=f'{format_percentage(summary.unallocated_percentage)} of your estate is not assigned to any beneficiary.'
        ))

    unverified = [b.name for b in will.beneficiaries if not b.verified]
    if unverified:
        warnings.append(RiskWarning(
            level=RiskLevel.WARNING,
            category='beneficiaries',
            title='Unverified Beneficiaries',
            message=f'Not yet verified: {", ".join(unverified)}.'
        ))

    if summary.active_condition_count == 0:
        warnings.append(RiskWarning(
            level=RiskLevel.INFO,
            category='conditions',
            title='No Active Release Conditions',
            message='Assets will be released without a time lock or other condition.'
        ))

    return warnings
