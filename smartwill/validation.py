"""
Structural validation for SmartWill will data.

Validation Rules Documentation:
===============================

1. BENEFICIARY
   - id: required, unique within the owning will
   - name: required, max 100 chars, no HTML
   - relationship: optional, max 100 chars
   - percentage: required number in [0, 100] (booleans rejected)
   - verified: boolean if provided

2. ASSETS
   - nfts: required non-negative integer
   - stx, btc: required non-negative decimal strings ('50,000', '2.5')
   - totalValue: required non-negative decimal string, optional leading '$'

3. CONDITIONS
   - type: required, max 100 chars
   - description: optional, max 500 chars
   - status: required enum [active, inactive]

4. WILL
   - beneficiaries and conditions must be lists, assets must be present
   - Total beneficiary percentage must not exceed 100% (blocking)
   - Total below 100% is reported as a non-blocking warning

5. AUXILIARY RECORDS
   - Recommendation: type/impact enums, confidence in [0, 100]
   - Memory box: type enum, non-negative count, unlockDate YYYY-MM-DD
   - Time capsule: type enum, recipient required, releaseDate YYYY-MM-DD
   - Guardian: name required, verified boolean
   - Price history: non-negative prices, strictly increasing timestamps

Errors are always collected, never short-circuited, so every field problem
is reported to the editor in one pass.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Collection, Dict, Iterable, List, Optional

from smartwill.utils import parse_decimal_string


@dataclass
class ValidationError:
    """Represents a single validation error with precise field path."""
    field: str
    reason: str
    code: str = 'invalid'
    section: str = ''  # For grouping errors by section


@dataclass
class ValidationResult:
    """Container for validation results."""
    errors: List[ValidationError] = field(default_factory=list)
    is_valid: bool = True
    warnings: List[ValidationError] = field(default_factory=list)  # Non-blocking issues

    def add_error(self, field: str, reason: str, code: str = 'invalid', section: str = ''):
        """Add a validation error."""
        self.errors.append(ValidationError(field, reason, code, section))
        self.is_valid = False

    def add_warning(self, field: str, reason: str, code: str = 'warning', section: str = ''):
        """Add a non-blocking warning."""
        self.warnings.append(ValidationError(field, reason, code, section))

    def errors_for(self, field: str) -> List[ValidationError]:
        return [e for e in self.errors if e.field == field]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            'ok': self.is_valid,
            'errors': [
                {'field': e.field, 'reason': e.reason, 'code': e.code, 'section': e.section}
                for e in self.errors
            ],
            'warnings': [
                {'field': w.field, 'reason': w.reason, 'code': w.code, 'section': w.section}
                for w in self.warnings
            ]
        }


# Constants for validation
MAX_NAME_LENGTH = 100
MAX_TEXT_LENGTH = 500
MAX_PERCENTAGE = 100
MIN_PERCENTAGE = 0
MAX_CONFIDENCE = 100
MAX_BENEFICIARIES = 50

HTML_TAG_PATTERN = re.compile(r'<[^>]+>')

# Enums - strictly enforced
CONDITION_STATUSES = ['active', 'inactive']
RECOMMENDATION_TYPES = ['optimization', 'security', 'tax']
IMPACT_LEVELS = ['high', 'medium', 'low']
MEMORY_BOX_TYPES = ['photos', 'audio', 'documents']
TIME_CAPSULE_TYPES = ['video', 'letter', 'document']


def _as_mapping(value: Any) -> Any:
    """Accept model instances as well as wire dictionaries."""
    to_dict = getattr(value, 'to_dict', None)
    if callable(to_dict):
        return to_dict()
    return value


def _path(prefix: str, name: str) -> str:
    return f'{prefix}.{name}' if prefix else name


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _is_beneficiary_id(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return False
    return not (isinstance(value, str) and value.strip() == '')


def validate_string(value: Any, field_name: str, result: ValidationResult,
                    required: bool = True, max_length: int = MAX_NAME_LENGTH,
                    section: str = '') -> bool:
    """Validate a string field."""
    if value is None or (isinstance(value, str) and value.strip() == ''):
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    if not isinstance(value, str):
        result.add_error(field_name, 'Must be text', 'type', section)
        return False

    str_value = value.strip()

    if len(str_value) > max_length:
        result.add_error(field_name, f'Maximum {max_length} characters allowed', 'max_length', section)
        return False

    if HTML_TAG_PATTERN.search(str_value):
        result.add_error(field_name, 'HTML tags are not allowed', 'invalid_chars', section)
        return False

    return True


def validate_boolean(value: Any, field_name: str, result: ValidationResult,
                     required: bool = True, section: str = '') -> bool:
    """Validate a boolean field with strict type checking."""
    if value is None:
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    if not isinstance(value, bool):
        result.add_error(field_name, 'Must be true or false', 'type', section)
        return False

    return True


def validate_enum(value: Any, field_name: str, allowed: List[str],
                  result: ValidationResult, required: bool = True, section: str = '') -> bool:
    """Validate an enum field with strict matching."""
    if value is None or str(value).strip() == '':
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    if str(value).strip() not in allowed:
        result.add_error(field_name, f'Must be one of: {", ".join(allowed)}', 'enum', section)
        return False

    return True


def validate_percentage(value: Any, field_name: str, result: ValidationResult,
                        required: bool = True, section: str = '') -> bool:
    """Validate a percentage value (0-100)."""
    if value is None:
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    if not _is_number(value):
        result.add_error(field_name, 'Must be a valid percentage', 'type', section)
        return False

    if value < MIN_PERCENTAGE or value > MAX_PERCENTAGE:
        result.add_error(field_name, 'Percentage must be between 0 and 100', 'range', section)
        return False

    return True


def validate_non_negative_int(value: Any, field_name: str, result: ValidationResult,
                              required: bool = True, section: str = '') -> bool:
    """Validate a whole, non-negative count."""
    if value is None:
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    if isinstance(value, bool) or not isinstance(value, int):
        result.add_error(field_name, 'Must be a whole number', 'type', section)
        return False

    if value < 0:
        result.add_error(field_name, 'Must not be negative', 'min_value', section)
        return False

    return True


def validate_decimal_string(value: Any, field_name: str, result: ValidationResult,
                            required: bool = True, allow_currency: bool = False,
                            section: str = '') -> bool:
    """Validate a non-negative decimal string such as '50,000' or '2.5'."""
    if value is None or (isinstance(value, str) and value.strip() == ''):
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    number = parse_decimal_string(value, allow_currency=allow_currency)
    if number is None:
        result.add_error(field_name, 'Must be a valid decimal amount', 'format', section)
        return False

    if number < 0:
        result.add_error(field_name, 'Must not be negative', 'min_value', section)
        return False

    return True


def validate_date(value: Any, field_name: str, result: ValidationResult,
                  required: bool = True, section: str = '') -> bool:
    """Validate a date field (YYYY-MM-DD format)."""
    if value is None or (isinstance(value, str) and value.strip() == ''):
        if required:
            result.add_error(field_name, 'This field is required', 'required', section)
        return False

    try:
        datetime.strptime(str(value).strip(), '%Y-%m-%d')
    except ValueError:
        result.add_error(field_name, 'Please enter a valid date (YYYY-MM-DD)', 'format', section)
        return False

    return True


def _require_mapping(value: Any, field_name: str, result: ValidationResult, section: str) -> bool:
    if not isinstance(value, dict):
        result.add_error(field_name, 'Must be an object', 'type', section)
        return False
    return True


def validate_beneficiary(beneficiary: Any, existing_ids: Optional[Collection[Any]] = None,
                         prefix: str = '', result: Optional[ValidationResult] = None) -> ValidationResult:
    """
    Validate a single beneficiary.

    Args:
        beneficiary: Wire dict or Beneficiary instance
        existing_ids: Ids already used by other beneficiaries of the same will
        prefix: Field path prefix, e.g. 'beneficiaries[2]'
        result: Result to add errors to (a new one is created if None)

    Returns:
        The ValidationResult
    """
    section = 'beneficiaries'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(beneficiary)
    if not _require_mapping(data, prefix or 'beneficiary', result, section):
        return result

    beneficiary_id = data.get('id')
    id_field = _path(prefix, 'id')
    if beneficiary_id is None or (isinstance(beneficiary_id, str) and beneficiary_id.strip() == ''):
        result.add_error(id_field, 'This field is required', 'required', section)
    elif not _is_beneficiary_id(beneficiary_id):
        result.add_error(id_field, 'Must be a number or text identifier', 'type', section)
    elif existing_ids is not None and beneficiary_id in existing_ids:
        result.add_error(id_field, f'Beneficiary id {beneficiary_id!r} is already used in this will',
                         'duplicate', section)

    validate_string(data.get('name'), _path(prefix, 'name'), result, section=section)
    validate_string(data.get('relationship'), _path(prefix, 'relationship'), result,
                    required=False, section=section)
    validate_percentage(data.get('percentage'), _path(prefix, 'percentage'), result, section=section)
    validate_boolean(data.get('verified'), _path(prefix, 'verified'), result,
                     required=False, section=section)

    return result


def validate_assets(assets: Any, prefix: str = '',
                    result: Optional[ValidationResult] = None) -> ValidationResult:
    """Validate the asset snapshot."""
    section = 'assets'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(assets)
    if not _require_mapping(data, prefix or 'assets', result, section):
        return result

    validate_decimal_string(data.get('stx'), _path(prefix, 'stx'), result, section=section)
    validate_decimal_string(data.get('btc'), _path(prefix, 'btc'), result, section=section)
    validate_non_negative_int(data.get('nfts'), _path(prefix, 'nfts'), result, section=section)
    validate_decimal_string(data.get('totalValue'), _path(prefix, 'totalValue'), result,
                            allow_currency=True, section=section)

    return result


def validate_condition(condition: Any, prefix: str = '',
                       result: Optional[ValidationResult] = None) -> ValidationResult:
    """Validate a release condition."""
    section = 'conditions'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(condition)
    if not _require_mapping(data, prefix or 'condition', result, section):
        return result

    validate_string(data.get('type'), _path(prefix, 'type'), result, section=section)
    validate_string(data.get('description'), _path(prefix, 'description'), result,
                    required=False, max_length=MAX_TEXT_LENGTH, section=section)
    validate_enum(data.get('status'), _path(prefix, 'status'), CONDITION_STATUSES, result,
                  section=section)

    return result


def validate_will(will: Any) -> ValidationResult:
    """
    Main validation entry point. Validates an entire will.

    Args:
        will: Wire dict or WillData instance

    Returns:
        ValidationResult with every error found
    """
    result = ValidationResult()
    data = _as_mapping(will)

    if not isinstance(data, dict):
        result.add_error('', 'Will must be a JSON object', 'type', 'general')
        return result

    # Beneficiaries
    beneficiaries = data.get('beneficiaries')
    if beneficiaries is None:
        beneficiaries = []
    if not isinstance(beneficiaries, list):
        result.add_error('beneficiaries', 'Must be a list', 'type', 'beneficiaries')
        beneficiaries = []
    elif len(beneficiaries) > MAX_BENEFICIARIES:
        result.add_error('beneficiaries', f'Maximum {MAX_BENEFICIARIES} beneficiaries allowed',
                         'max_items', 'beneficiaries')

    seen_ids = set()
    percentage_sum = 0.0
    for i, beneficiary in enumerate(beneficiaries):
        validate_beneficiary(beneficiary, existing_ids=seen_ids, prefix=f'beneficiaries[{i}]',
                             result=result)
        entry = _as_mapping(beneficiary)
        if isinstance(entry, dict):
            # Only well-typed ids take part in the duplicate check
            if _is_beneficiary_id(entry.get('id')):
                seen_ids.add(entry['id'])
            if _is_number(entry.get('percentage')):
                percentage_sum += entry['percentage']

    # Cross-beneficiary distribution rule
    if percentage_sum > MAX_PERCENTAGE + 1e-9:
        result.add_error('beneficiaries',
                         f'Total distribution must not exceed 100% (current: {percentage_sum:g}%)',
                         'distribution_sum', 'beneficiaries')
    elif beneficiaries and percentage_sum < MAX_PERCENTAGE - 1e-9:
        result.add_warning('beneficiaries',
                           f'{MAX_PERCENTAGE - percentage_sum:g}% of the estate is not allocated',
                           'under_allocated', 'beneficiaries')

    # Assets
    assets = data.get('assets')
    if assets is None:
        result.add_error('assets', 'This field is required', 'required', 'assets')
    else:
        validate_assets(assets, prefix='assets', result=result)

    # Conditions
    conditions = data.get('conditions')
    if conditions is None:
        conditions = []
    if not isinstance(conditions, list):
        result.add_error('conditions', 'Must be a list', 'type', 'conditions')
        conditions = []
    for i, condition in enumerate(conditions):
        validate_condition(condition, prefix=f'conditions[{i}]', result=result)

    return result


def validate_recommendation(recommendation: Any,
                            result: Optional[ValidationResult] = None) -> ValidationResult:
    section = 'ai_advisor'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(recommendation)
    if not _require_mapping(data, 'recommendation', result, section):
        return result

    validate_enum(data.get('type'), 'type', RECOMMENDATION_TYPES, result, section=section)
    validate_string(data.get('title'), 'title', result, section=section)
    validate_enum(data.get('impact'), 'impact', IMPACT_LEVELS, result, section=section)

    confidence = data.get('confidence')
    if not _is_number(confidence):
        result.add_error('confidence', 'Must be a number', 'type', section)
    elif confidence < 0 or confidence > MAX_CONFIDENCE:
        result.add_error('confidence', 'Confidence must be between 0 and 100', 'range', section)

    return result


def validate_memory_box(memory_box: Any, result: Optional[ValidationResult] = None) -> ValidationResult:
    section = 'legacy'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(memory_box)
    if not _require_mapping(data, 'memory_box', result, section):
        return result

    validate_string(data.get('title'), 'title', result, section=section)
    validate_enum(data.get('type'), 'type', MEMORY_BOX_TYPES, result, section=section)
    validate_non_negative_int(data.get('count'), 'count', result, section=section)
    validate_date(data.get('unlockDate'), 'unlockDate', result, section=section)

    return result


def validate_time_capsule(capsule: Any, result: Optional[ValidationResult] = None) -> ValidationResult:
    section = 'legacy'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(capsule)
    if not _require_mapping(data, 'time_capsule', result, section):
        return result

    validate_string(data.get('title'), 'title', result, section=section)
    validate_string(data.get('recipient'), 'recipient', result, section=section)
    validate_date(data.get('releaseDate'), 'releaseDate', result, section=section)
    validate_enum(data.get('type'), 'type', TIME_CAPSULE_TYPES, result, section=section)

    return result


def validate_guardian(guardian: Any, result: Optional[ValidationResult] = None) -> ValidationResult:
    section = 'security'
    if result is None:
        result = ValidationResult()

    data = _as_mapping(guardian)
    if not _require_mapping(data, 'guardian', result, section):
        return result

    validate_string(data.get('name'), 'name', result, section=section)
    validate_string(data.get('relationship'), 'relationship', result, required=False, section=section)
    validate_boolean(data.get('verified'), 'verified', result, section=section)
    validate_string(data.get('responseTime'), 'responseTime', result, required=False,
                    max_length=20, section=section)

    return result


def validate_price_history(points: Iterable[Any]) -> ValidationResult:
    """Price samples must be non-negative and strictly ordered by timestamp."""
    section = 'market'
    result = ValidationResult()

    previous = None
    for i, point in enumerate(points):
        data = _as_mapping(point)
        prefix = f'history[{i}]'
        if not _require_mapping(data, prefix, result, section):
            continue

        price = data.get('price')
        if not _is_number(price):
            result.add_error(f'{prefix}.price', 'Must be a number', 'type', section)
        elif price < 0:
            result.add_error(f'{prefix}.price', 'Must not be negative', 'min_value', section)

        timestamp = data.get('timestamp')
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            result.add_error(f'{prefix}.timestamp', 'Must be an epoch timestamp', 'type', section)
            continue

        if previous is not None and timestamp <= previous:
            result.add_error(f'{prefix}.timestamp', 'Samples must be in increasing timestamp order',
                             'order', section)
        previous = timestamp

    return result
