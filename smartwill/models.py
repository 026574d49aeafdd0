"""
Domain models for SmartWill.

A will (WillData) owns three child collections: beneficiaries, an asset
snapshot and release conditions. Auxiliary records (recommendations, memory
boxes, time capsules, recovery guardians, price points) share the same shape
conventions and are consumed by the dashboard and vault views.

All records are immutable. Wire dictionaries use the camelCase keys of the
rendering layer (totalValue, unlockDate, ...); from_dict/to_dict translate.

Enhanced with:
- WillStatus lifecycle (draft -> review -> deployed) gated by validation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class ConditionStatus(str, Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class RecommendationType(str, Enum):
    OPTIMIZATION = 'optimization'
    SECURITY = 'security'
    TAX = 'tax'


class ImpactLevel(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class MemoryBoxType(str, Enum):
    PHOTOS = 'photos'
    AUDIO = 'audio'
    DOCUMENTS = 'documents'


class TimeCapsuleType(str, Enum):
    VIDEO = 'video'
    LETTER = 'letter'
    DOCUMENT = 'document'


class WillStatus(str, Enum):
    """Will lifecycle states."""
    DRAFT = 'draft'
    REVIEW = 'review'
    DEPLOYED = 'deployed'  # Final state - handed to the blockchain collaborator


@dataclass(frozen=True)
class Beneficiary:
    """A named recipient entitled to a percentage share of the estate."""
    id: Union[int, str]
    name: str
    relationship: str = ''
    percentage: float = 0
    verified: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Beneficiary':
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            relationship=data.get('relationship', ''),
            percentage=data.get('percentage', 0),
            verified=bool(data.get('verified', False))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'relationship': self.relationship,
            'percentage': self.percentage,
            'verified': self.verified,
        }


@dataclass(frozen=True)
class Assets:
    """Asset snapshot. Balances are decimal strings as shown to the owner."""
    stx: str = '0'
    btc: str = '0'
    nfts: int = 0
    total_value: str = '$0'

    @classmethod
    def empty(cls) -> 'Assets':
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Assets':
        if not data:
            return cls()
        return cls(
            stx=data.get('stx', '0'),
            btc=data.get('btc', '0'),
            nfts=data.get('nfts', 0),
            total_value=data.get('totalValue', '$0')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stx': self.stx,
            'btc': self.btc,
            'nfts': self.nfts,
            'totalValue': self.total_value,
        }


@dataclass(frozen=True)
class WillCondition:
    """A rule gating release of assets (time lock, age requirement, ...)."""
    type: str
    description: str = ''
    status: ConditionStatus = ConditionStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == ConditionStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WillCondition':
        return cls(
            type=data.get('type', ''),
            description=data.get('description', ''),
            status=ConditionStatus(data.get('status', ConditionStatus.ACTIVE.value))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'description': self.description,
            'status': self.status.value,
        }


@dataclass(frozen=True)
class WillData:
    """Aggregate root of a will."""
    beneficiaries: Tuple[Beneficiary, ...] = ()
    assets: Assets = field(default_factory=Assets)
    conditions: Tuple[WillCondition, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'beneficiaries', tuple(self.beneficiaries))
        object.__setattr__(self, 'conditions', tuple(self.conditions))

    @classmethod
    def empty(cls) -> 'WillData':
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WillData':
        if not data:
            return cls()
        return cls(
            beneficiaries=[Beneficiary.from_dict(b) for b in data.get('beneficiaries') or []],
            assets=Assets.from_dict(data.get('assets') or {}),
            conditions=[WillCondition.from_dict(c) for c in data.get('conditions') or []]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'beneficiaries': [b.to_dict() for b in self.beneficiaries],
            'assets': self.assets.to_dict(),
            'conditions': [c.to_dict() for c in self.conditions],
        }

    def total_percentage(self) -> float:
        return sum(b.percentage for b in self.beneficiaries)

    def active_conditions(self) -> List[WillCondition]:
        return [c for c in self.conditions if c.is_active]


@dataclass(frozen=True)
class AIRecommendation:
    id: int
    type: RecommendationType
    title: str
    description: str = ''
    confidence: float = 0
    impact: ImpactLevel = ImpactLevel.MEDIUM

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AIRecommendation':
        return cls(
            id=data.get('id'),
            type=RecommendationType(data.get('type')),
            title=data.get('title', ''),
            description=data.get('description', ''),
            confidence=data.get('confidence', 0),
            impact=ImpactLevel(data.get('impact', ImpactLevel.MEDIUM.value))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type.value,
            'title': self.title,
            'description': self.description,
            'confidence': self.confidence,
            'impact': self.impact.value,
        }


@dataclass(frozen=True)
class MemoryBox:
    id: int
    title: str
    type: MemoryBoxType
    count: int = 0
    unlock_date: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MemoryBox':
        return cls(
            id=data.get('id'),
            title=data.get('title', ''),
            type=MemoryBoxType(data.get('type')),
            count=data.get('count', 0),
            unlock_date=data.get('unlockDate', '')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type.value,
            'count': self.count,
            'unlockDate': self.unlock_date,
        }


@dataclass(frozen=True)
class TimeCapsule:
    id: int
    title: str
    recipient: str
    release_date: str
    type: TimeCapsuleType

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TimeCapsule':
        return cls(
            id=data.get('id'),
            title=data.get('title', ''),
            recipient=data.get('recipient', ''),
            release_date=data.get('releaseDate', ''),
            type=TimeCapsuleType(data.get('type'))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'recipient': self.recipient,
            'releaseDate': self.release_date,
            'type': self.type.value,
        }


@dataclass(frozen=True)
class SocialRecoveryGuardian:
    id: int
    name: str
    relationship: str = ''
    verified: bool = False
    response_time: str = 'pending'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SocialRecoveryGuardian':
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            relationship=data.get('relationship', ''),
            verified=bool(data.get('verified', False)),
            response_time=data.get('responseTime', 'pending')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'relationship': self.relationship,
            'verified': self.verified,
            'responseTime': self.response_time,
        }


@dataclass(frozen=True)
class StacksPricePoint:
    """One sample of the STX price series. Timestamp is epoch milliseconds."""
    price: float
    timestamp: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StacksPricePoint':
        return cls(price=data['price'], timestamp=data['timestamp'])

    def to_dict(self) -> Dict[str, Any]:
        return {'price': self.price, 'timestamp': self.timestamp}


class WillStateError(ValueError):
    """Raised on an illegal lifecycle transition."""


class WillValidationFailed(WillStateError):
    """Raised when a will cannot leave draft because validation failed."""

    def __init__(self, result):
        self.result = result
        super().__init__(f'Will failed validation with {len(result.errors)} error(s)')


@dataclass
class WillDocument:
    """
    A will owned by a single owner, tracked through its lifecycle.

    Only drafts may be edited. Moving to review requires a valid will;
    deployment is recorded with the reference returned by the external
    deployment collaborator.
    """
    owner_id: str
    data: WillData = field(default_factory=WillData.empty)
    status: WillStatus = WillStatus.DRAFT
    version: int = 1
    deployment_ref: Optional[str] = None

    def __repr__(self):
        return f'<WillDocument {self.owner_id} v{self.version} - {self.status.value}>'

    def can_edit(self) -> bool:
        return self.status == WillStatus.DRAFT

    def update(self, data: WillData):
        """Replace the will contents. Drafts only."""
        if not self.can_edit():
            raise WillStateError(f'Cannot edit a will in {self.status.value} state')
        self.data = data
        self.version += 1

    def submit_for_review(self):
        """Move draft -> review. Returns the ValidationResult (warnings may be present)."""
        # Import here to avoid circular import
        from smartwill.validation import validate_will

        if self.status != WillStatus.DRAFT:
            raise WillStateError(f'Only drafts can be submitted for review (currently {self.status.value})')

        result = validate_will(self.data)
        if not result.is_valid:
            raise WillValidationFailed(result)

        self.status = WillStatus.REVIEW
        return result

    def return_to_draft(self):
        """Move review -> draft so the owner can make further edits."""
        if self.status != WillStatus.REVIEW:
            raise WillStateError(f'Only wills under review can return to draft (currently {self.status.value})')
        self.status = WillStatus.DRAFT

    def mark_deployed(self, deployment_ref: str):
        """Record a completed deployment. Review -> deployed."""
        if self.status != WillStatus.REVIEW:
            raise WillStateError(f'Only reviewed wills can be deployed (currently {self.status.value})')
        if not deployment_ref or not str(deployment_ref).strip():
            raise WillStateError('Deployment reference is required')
        self.deployment_ref = str(deployment_ref).strip()
        self.status = WillStatus.DEPLOYED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'owner_id': self.owner_id,
            'status': self.status.value,
            'version': self.version,
            'deployment_ref': self.deployment_ref,
            'will': self.data.to_dict(),
        }
