"""
Unit tests for validation module.
"""

import pytest

from smartwill.models import Assets, Beneficiary, WillData
from smartwill.validation import (
    ValidationResult, validate_assets, validate_beneficiary, validate_condition,
    validate_decimal_string, validate_guardian, validate_memory_box,
    validate_percentage, validate_price_history, validate_recommendation,
    validate_time_capsule, validate_will
)


def make_will(**overrides):
    will = {
        'beneficiaries': [
            {'id': 1, 'name': 'Sarah Johnson', 'relationship': 'Spouse', 'percentage': 60, 'verified': True},
            {'id': 2, 'name': 'Michael Johnson', 'relationship': 'Son', 'percentage': 40, 'verified': False},
        ],
        'assets': {'stx': '50,000', 'btc': '2.5', 'nfts': 12, 'totalValue': '$125,000'},
        'conditions': [
            {'type': 'Time Lock', 'description': 'Release after 30 days of inactivity', 'status': 'active'},
        ],
    }
    will.update(overrides)
    return will


class TestValidationResult:
    def test_initially_valid(self):
        result = ValidationResult()
        assert result.is_valid is True
        assert len(result.errors) == 0

    def test_add_error(self):
        result = ValidationResult()
        result.add_error('field', 'reason', 'code')
        assert result.is_valid is False
        assert result.errors[0].field == 'field'
        assert result.errors[0].reason == 'reason'
        assert result.errors[0].code == 'code'

    def test_warning_does_not_invalidate(self):
        result = ValidationResult()
        result.add_warning('field', 'reason')
        assert result.is_valid is True
        assert result.to_dict()['warnings'][0]['field'] == 'field'

    def test_to_dict(self):
        result = ValidationResult()
        result.add_error('field', 'reason', 'code')
        d = result.to_dict()
        assert d['ok'] is False
        assert d['errors'] == [{'field': 'field', 'reason': 'reason', 'code': 'code', 'section': ''}]


class TestPercentageValidation:
    def test_bounds_inclusive(self):
        result = ValidationResult()
        assert validate_percentage(0, 'field', result) is True
        assert validate_percentage(100, 'field', result) is True
        assert validate_percentage(33.3, 'field', result) is True

    def test_out_of_range(self):
        result = ValidationResult()
        assert validate_percentage(150, 'field', result) is False
        assert validate_percentage(-10, 'field', result) is False
        assert [e.code for e in result.errors] == ['range', 'range']

    def test_boolean_rejected(self):
        result = ValidationResult()
        assert validate_percentage(True, 'field', result) is False
        assert result.errors[0].code == 'type'

    def test_string_rejected(self):
        result = ValidationResult()
        assert validate_percentage('50', 'field', result) is False


class TestDecimalStringValidation:
    @pytest.mark.parametrize('value', ['0', '2.5', '50,000', '1,234,567.89', '125000'])
    def test_valid(self, value):
        result = ValidationResult()
        assert validate_decimal_string(value, 'stx', result) is True

    @pytest.mark.parametrize('value', ['abc', '1,00', '2.5.1', '1e5', '$100', '', ' ', '12,34,567'])
    def test_malformed(self, value):
        result = ValidationResult()
        assert validate_decimal_string(value, 'stx', result) is False

    def test_currency_allowed_when_requested(self):
        result = ValidationResult()
        assert validate_decimal_string('$125,000', 'totalValue', result, allow_currency=True) is True

    def test_negative(self):
        result = ValidationResult()
        assert validate_decimal_string('-5', 'btc', result) is False
        assert result.errors[0].code == 'min_value'

    def test_non_string(self):
        result = ValidationResult()
        assert validate_decimal_string(5, 'btc', result) is False
        assert result.errors[0].code == 'format'


class TestBeneficiaryValidation:
    def test_valid(self):
        result = validate_beneficiary({'id': 1, 'name': 'Sarah', 'percentage': 50, 'verified': True})
        assert result.is_valid is True

    def test_percentage_over_hundred(self):
        result = validate_beneficiary({'id': 1, 'name': 'Sarah', 'percentage': 150})
        assert result.is_valid is False
        assert len(result.errors_for('percentage')) == 1

    def test_empty_name(self):
        result = validate_beneficiary({'id': 1, 'name': '  ', 'percentage': 10})
        assert result.errors_for('name')[0].code == 'required'

    def test_duplicate_id(self):
        result = validate_beneficiary({'id': 2, 'name': 'Sarah', 'percentage': 10}, existing_ids=[1, 2])
        assert result.errors_for('id')[0].code == 'duplicate'

    def test_missing_id(self):
        result = validate_beneficiary({'name': 'Sarah', 'percentage': 10})
        assert result.errors_for('id')[0].code == 'required'

    def test_verified_must_be_boolean(self):
        result = validate_beneficiary({'id': 1, 'name': 'Sarah', 'percentage': 10, 'verified': 'yes'})
        assert result.errors_for('verified')[0].code == 'type'

    def test_html_in_name(self):
        result = validate_beneficiary({'id': 1, 'name': '<b>Sarah</b>', 'percentage': 10})
        assert result.errors_for('name')[0].code == 'invalid_chars'

    def test_collects_all_errors(self):
        result = validate_beneficiary({'id': None, 'name': '', 'percentage': 101})
        assert {e.field for e in result.errors} == {'id', 'name', 'percentage'}

    def test_accepts_model_instance(self):
        assert validate_beneficiary(Beneficiary(1, 'Sarah', 'Spouse', 40, True)).is_valid is True

    def test_prefix(self):
        result = validate_beneficiary({'id': 1, 'name': 'Sarah', 'percentage': -1}, prefix='beneficiaries[3]')
        assert result.errors[0].field == 'beneficiaries[3].percentage'


class TestAssetsValidation:
    def test_valid(self):
        assert validate_assets({'stx': '50,000', 'btc': '2.5', 'nfts': 12, 'totalValue': '$125,000'}).is_valid

    def test_negative_nfts(self):
        result = validate_assets({'stx': '0', 'btc': '0', 'nfts': -1, 'totalValue': '$0'})
        assert result.errors_for('nfts')[0].code == 'min_value'

    def test_fractional_nfts(self):
        result = validate_assets({'stx': '0', 'btc': '0', 'nfts': 1.5, 'totalValue': '$0'})
        assert result.errors_for('nfts')[0].code == 'type'

    def test_malformed_balances(self):
        result = validate_assets({'stx': 'lots', 'btc': '-1', 'nfts': 0, 'totalValue': '125 dollars'})
        assert {e.field for e in result.errors} == {'stx', 'btc', 'totalValue'}

    def test_empty_assets_valid(self):
        assert validate_assets(Assets.empty()).is_valid is True

    def test_not_an_object(self):
        result = validate_assets(['stx'])
        assert result.errors[0].code == 'type'


class TestConditionValidation:
    def test_valid(self):
        assert validate_condition({'type': 'Time Lock', 'description': '', 'status': 'inactive'}).is_valid

    def test_bad_status(self):
        result = validate_condition({'type': 'Time Lock', 'status': 'paused'})
        assert result.errors_for('status')[0].code == 'enum'

    def test_missing_type(self):
        result = validate_condition({'status': 'active'})
        assert result.errors_for('type')[0].code == 'required'


class TestWillValidation:
    def test_valid_will(self):
        result = validate_will(make_will())
        assert result.is_valid is True
        assert result.warnings == []

    def test_distribution_over_hundred(self):
        will = make_will(beneficiaries=[
            {'id': 1, 'name': 'A', 'percentage': 60},
            {'id': 2, 'name': 'B', 'percentage': 50},
        ])
        result = validate_will(will)
        assert result.is_valid is False
        errors = result.errors_for('beneficiaries')
        assert len(errors) == 1
        assert errors[0].code == 'distribution_sum'

    def test_under_allocation_is_warning(self):
        will = make_will(beneficiaries=[{'id': 1, 'name': 'A', 'percentage': 70}])
        result = validate_will(will)
        assert result.is_valid is True
        assert result.warnings[0].code == 'under_allocated'

    def test_no_beneficiaries_no_warning(self):
        result = validate_will(make_will(beneficiaries=[]))
        assert result.is_valid is True
        assert result.warnings == []

    def test_duplicate_ids_across_will(self):
        will = make_will(beneficiaries=[
            {'id': 7, 'name': 'A', 'percentage': 50},
            {'id': 7, 'name': 'B', 'percentage': 50},
        ])
        result = validate_will(will)
        assert result.errors_for('beneficiaries[1].id')[0].code == 'duplicate'
        assert result.errors_for('beneficiaries[0].id') == []

    def test_unhashable_id_still_collects_errors(self):
        will = make_will(beneficiaries=[
            {'id': [1], 'name': 'A', 'percentage': 10},
            {'id': 2, 'name': 'B', 'percentage': 10},
        ])
        result = validate_will(will)
        assert result.errors_for('beneficiaries[0].id')[0].code == 'type'
        assert result.errors_for('beneficiaries[1].id') == []

    def test_boolean_id_is_not_counted_as_duplicate(self):
        will = make_will(beneficiaries=[
            {'id': True, 'name': 'A', 'percentage': 50},
            {'id': 1, 'name': 'B', 'percentage': 50},
        ])
        result = validate_will(will)
        assert result.errors_for('beneficiaries[0].id')[0].code == 'type'
        assert result.errors_for('beneficiaries[1].id') == []

    def test_errors_aggregated_across_sections(self):
        will = make_will(
            beneficiaries=[{'id': 1, 'name': '', 'percentage': 150}],
            assets={'stx': '0', 'btc': '0', 'nfts': -1, 'totalValue': '$0'},
            conditions=[{'type': 'Time Lock', 'status': 'unknown'}],
        )
        fields = {e.field for e in validate_will(will).errors}
        assert {
            'beneficiaries[0].name', 'beneficiaries[0].percentage', 'beneficiaries',
            'assets.nfts', 'conditions[0].status',
        } <= fields

    def test_missing_assets(self):
        will = make_will()
        del will['assets']
        assert validate_will(will).errors_for('assets')[0].code == 'required'

    def test_wrong_collection_types(self):
        result = validate_will(make_will(beneficiaries='Sarah', conditions={}))
        assert result.errors_for('beneficiaries')[0].code == 'type'
        assert result.errors_for('conditions')[0].code == 'type'

    def test_not_an_object(self):
        assert validate_will('will').is_valid is False

    def test_accepts_will_data(self):
        assert validate_will(WillData.from_dict(make_will())).is_valid is True


class TestAuxiliaryValidation:
    def test_recommendation(self):
        valid = {'id': 1, 'type': 'tax', 'title': 'Tax', 'confidence': 95, 'impact': 'high'}
        assert validate_recommendation(valid).is_valid
        result = validate_recommendation(dict(valid, confidence=120, impact='huge'))
        assert {e.field for e in result.errors} == {'confidence', 'impact'}

    def test_memory_box(self):
        valid = {'id': 1, 'title': 'Photos', 'type': 'photos', 'count': 150, 'unlockDate': '2030-01-01'}
        assert validate_memory_box(valid).is_valid
        result = validate_memory_box(dict(valid, count=-3, unlockDate='01/01/2030'))
        assert {e.field for e in result.errors} == {'count', 'unlockDate'}

    def test_time_capsule(self):
        valid = {'id': 1, 'title': 'Letter', 'recipient': 'Michael', 'releaseDate': '2030-01-01', 'type': 'letter'}
        assert validate_time_capsule(valid).is_valid
        result = validate_time_capsule(dict(valid, recipient='', type='hologram'))
        assert {e.field for e in result.errors} == {'recipient', 'type'}

    def test_guardian(self):
        valid = {'id': 1, 'name': 'Emma', 'relationship': 'Sister', 'verified': True, 'responseTime': '2h'}
        assert validate_guardian(valid).is_valid
        assert validate_guardian(dict(valid, verified=None)).errors_for('verified')[0].code == 'required'

    def test_price_history_order(self):
        points = [
            {'price': 2.4, 'timestamp': 1000},
            {'price': 2.5, 'timestamp': 2000},
            {'price': 2.45, 'timestamp': 2000},
        ]
        result = validate_price_history(points)
        assert result.errors_for('history[2].timestamp')[0].code == 'order'

    def test_price_history_negative_price(self):
        result = validate_price_history([{'price': -1, 'timestamp': 1}])
        assert result.errors_for('history[0].price')[0].code == 'min_value'
