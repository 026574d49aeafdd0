"""
Demonstration data set.

Served by the application shell until a storage collaborator provides real
will records.
"""

from typing import List

from smartwill.models import (
    AIRecommendation, Assets, Beneficiary, ConditionStatus, ImpactLevel,
    MemoryBox, MemoryBoxType, RecommendationType, SocialRecoveryGuardian,
    TimeCapsule, TimeCapsuleType, WillCondition, WillData
)


def get_sample_will_data() -> WillData:
    return WillData(
        beneficiaries=[
            Beneficiary(1, 'Sarah Johnson', 'Spouse', 60, True),
            Beneficiary(2, 'Michael Johnson', 'Son', 25, True),
            Beneficiary(3, 'Emily Johnson', 'Daughter', 15, False),
        ],
        assets=Assets(stx='50,000', btc='2.5', nfts=12, total_value='$125,000'),
        conditions=[
            WillCondition('Age Requirement', 'Children must be 21+ to inherit', ConditionStatus.ACTIVE),
            WillCondition('Time Lock', 'Release after 30 days of inactivity', ConditionStatus.ACTIVE),
        ]
    )


def get_sample_recommendations() -> List[AIRecommendation]:
    return [
        AIRecommendation(
            id=1,
            type=RecommendationType.OPTIMIZATION,
            title='Optimize Asset Distribution',
            description='Consider redistributing 5% from savings to crypto based on market trends',
            confidence=87,
            impact=ImpactLevel.MEDIUM
        ),
        AIRecommendation(
            id=2,
            type=RecommendationType.SECURITY,
            title='Add Social Recovery',
            description='Consider adding your brother as a recovery guardian for enhanced security',
            confidence=92,
            impact=ImpactLevel.HIGH
        ),
        AIRecommendation(
            id=3,
            type=RecommendationType.TAX,
            title='Tax Optimization Available',
            description='Charitable donation could reduce inheritance tax by $3,400',
            confidence=95,
            impact=ImpactLevel.HIGH
        ),
    ]


def get_sample_memory_boxes() -> List[MemoryBox]:
    return [
        MemoryBox(1, 'Family Photos', MemoryBoxType.PHOTOS, 150, '2030-01-01'),
        MemoryBox(2, 'Voice Messages', MemoryBoxType.AUDIO, 12, '2028-06-15'),
        MemoryBox(3, 'Personal Letters', MemoryBoxType.DOCUMENTS, 8, '2025-12-25'),
    ]


def get_sample_time_capsules() -> List[TimeCapsule]:
    return [
        TimeCapsule(1, 'Wedding Anniversary Message', 'Sarah Johnson', '2026-05-20', TimeCapsuleType.VIDEO),
        TimeCapsule(2, 'Career Advice for Michael', 'Michael Johnson', '2030-01-01', TimeCapsuleType.LETTER),
        TimeCapsule(3, 'Family Recipe Collection', 'All Family', '2025-11-25', TimeCapsuleType.DOCUMENT),
    ]


def get_sample_guardians() -> List[SocialRecoveryGuardian]:
    return [
        SocialRecoveryGuardian(1, 'Emma Wilson', 'Sister', True, '2h'),
        SocialRecoveryGuardian(2, 'Dr. James Chen', 'Family Doctor', True, '24h'),
        SocialRecoveryGuardian(3, 'Robert Johnson', 'Best Friend', False, 'pending'),
    ]


def get_sample_data_set() -> dict:
    """Everything the dashboard and vault views need, as wire dictionaries."""
    return {
        'will': get_sample_will_data().to_dict(),
        'recommendations': [r.to_dict() for r in get_sample_recommendations()],
        'memory_boxes': [m.to_dict() for m in get_sample_memory_boxes()],
        'time_capsules': [t.to_dict() for t in get_sample_time_capsules()],
        'guardians': [g.to_dict() for g in get_sample_guardians()],
    }
