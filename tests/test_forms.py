# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the ready-made sub-forms and their composition."""

import pytest

from genro_formtree import (
    AmbiguousId,
    CustomError,
    FieldStatus,
    OptionSelected,
    PatternMismatch,
    RangeError,
    RequiredMissing,
    TextChanged,
    TypeMismatch,
    field,
    find_paths,
    get_at,
    get_with_id,
    parse,
    parse_update,
    parse_validate,
    string,
    to_json,
    update_values_from_json,
)
from genro_formtree.forms import (
    Address,
    AddressField,
    AddressId,
    Card,
    CardField,
    CardId,
    Recipient,
    RecipientField,
    RecipientId,
    Shipment,
    ShipmentId,
    address_form,
    address_parser,
    card_form,
    card_parser,
    recipient_form,
    recipient_parser,
    shipment_form,
    shipment_parser,
)
from genro_formtree.forms.address import POSTAL_CODE_PATTERN
from genro_formtree.mask import CARD_NUMBER_PATTERN

SHIPMENT_DATA = {
    'address': {
        'street': ' Via Roma 1 ',
        'city': 'Milano',
        'postal_code': '20100',
        'country': 'Italy',
    },
    'card': {
        'holder': 'Ada Lovelace',
        'number': '4532123456789012',
        'expiration': '0927',
        'cvc': '123',
    },
    'recipient': {
        'name': 'Bob',
        'email': 'bob@genropy.org',
        'phones': ['555-1234', '555-9876'],
    },
}


def filled_shipment():
    return update_values_from_json(shipment_form(), SHIPMENT_DATA).value


class TestAddress:
    """Tests for the address sub-form."""

    def test_parse(self):
        """Test a filled address parses, country label resolved."""
        form = update_values_from_json(address_form(), SHIPMENT_DATA['address']).value
        assert parse(address_parser(), form).value == Address(
            street='Via Roma 1', city='Milano', postal_code='20100', country='IT',
        )

    def test_unknown_country(self):
        """Test free text is not a country."""
        form = update_values_from_json(
            address_form(), dict(SHIPMENT_DATA['address'], country='Atlantis')
        ).value
        assert parse(address_parser(), form).error == [
            TypeMismatch(AddressId.COUNTRY, 'strict-autocomplete'),
        ]

    def test_country_by_option(self):
        """Test picking a suggestion selects the country code."""
        form, _ = parse_update(address_parser(), OptionSelected((3,), 2), address_form())
        assert get_at(form, (3,)).text == 'IT'
        assert get_at(form, (3,)).attrs.status is FieldStatus.VALID

    def test_short_postal_code(self):
        """Test an incomplete postal code fails on submit."""
        form = update_values_from_json(
            address_form(), dict(SHIPMENT_DATA['address'], postal_code='201')
        ).value
        assert parse(address_parser(), form).error == [
            PatternMismatch(AddressId.POSTAL_CODE, POSTAL_CODE_PATTERN),
        ]


class TestCard:
    """Tests for the card sub-form."""

    def test_parse_bare_digits(self):
        """Test the parsed card carries the bare number."""
        form = update_values_from_json(card_form(), SHIPMENT_DATA['card']).value
        assert parse(card_parser(), form).value == Card(
            holder='Ada Lovelace', number='4532123456789012',
            expiration='09/27', cvc='123',
        )

    def test_all_required(self):
        """Test an empty card reports every field in order."""
        assert parse(card_parser(), card_form()).error == [
            RequiredMissing(CardId.HOLDER),
            RequiredMissing(CardId.NUMBER),
            RequiredMissing(CardId.EXPIRATION),
            RequiredMissing(CardId.CVC),
        ]

    def test_invalid_month(self):
        """Test months beyond twelve are rejected."""
        form = update_values_from_json(
            card_form(), dict(SHIPMENT_DATA['card'], expiration='1327')
        ).value
        assert parse(card_parser(), form).error == [
            CustomError(CardId.EXPIRATION, 'Invalid month'),
        ]

    def test_short_number(self):
        """Test an incomplete card number on submit."""
        form = update_values_from_json(
            card_form(), dict(SHIPMENT_DATA['card'], number='4532 1234')
        ).value
        assert parse(card_parser(), form).error == [
            PatternMismatch(CardId.NUMBER, CARD_NUMBER_PATTERN),
        ]


class TestRecipient:
    """Tests for the recipient sub-form."""

    def test_parse(self):
        """Test phones are parsed in order."""
        form = update_values_from_json(recipient_form(), SHIPMENT_DATA['recipient']).value
        assert parse(recipient_parser(), form).value == Recipient(
            name='Bob', email='bob@genropy.org', phones=['555-1234', '555-9876'],
        )

    def test_initial_phones(self):
        """Test phones passed to the constructor."""
        form = recipient_form('555-1', '555-2')
        assert [i.text for i in get_at(form, (2,)).instances] == ['555-1', '555-2']

    def test_phone_bounds(self):
        """Test the phone list holds one to three numbers."""
        phones = get_at(recipient_form(), (2,))
        assert len(phones.instances) == 1
        assert len(phones.add().add().add().instances) == 3
        assert phones.attrs.add_label == 'Add phone'

    def test_phone_identifier_repeats(self):
        """Test the phone identifier is only unique within an instance."""
        form = recipient_form('555-1', '555-2')
        assert parse(field(RecipientId.PHONE, string), form).error == [
            AmbiguousId(RecipientId.PHONE, 2),
        ]


class TestShipment:
    """Tests for the composed shipment form."""

    def test_identifiers_are_wrapped(self):
        """Test sub-form identifiers are injected into the sum type."""
        form = shipment_form()
        assert get_with_id(form, AddressField(AddressId.STREET)).is_ok
        assert get_with_id(form, CardField(CardId.NUMBER)).is_ok
        assert find_paths(form, AddressId.STREET) == []
        phones = get_with_id(form, RecipientField(RecipientId.PHONES)).value
        assert phones.template.identifier == RecipientField(RecipientId.PHONE)

    def test_parse_filled(self):
        """Test a filled shipment parses into domain values."""
        assert parse(shipment_parser(), filled_shipment()).value == Shipment(
            address=Address('Via Roma 1', 'Milano', '20100', 'IT'),
            card=Card('Ada Lovelace', '4532123456789012', '09/27', '123'),
            recipient=Recipient('Bob', 'bob@genropy.org', ['555-1234', '555-9876']),
            packages=1,
            notes=None,
        )

    def test_errors_name_their_sub_form(self):
        """Test errors carry the wrapped identifiers, in composition order."""
        errors = parse(shipment_parser(), shipment_form()).error
        assert errors[0] == RequiredMissing(AddressField(AddressId.STREET))
        assert RequiredMissing(CardField(CardId.HOLDER)) in errors
        assert RequiredMissing(RecipientField(RecipientId.PHONE), path=(0,)) in errors
        assert errors.index(RequiredMissing(AddressField(AddressId.COUNTRY))) < \
            errors.index(RequiredMissing(CardField(CardId.HOLDER)))

    def test_packages_range(self):
        """Test the package count is bounded."""
        form = update_values_from_json(filled_shipment(), {'packages': 11}).value
        assert parse(shipment_parser(), form).error == [
            RangeError(ShipmentId.PACKAGES, 10),
        ]

    def test_notes(self):
        """Test notes are optional text."""
        form = update_values_from_json(filled_shipment(), {'notes': 'Ring twice'}).value
        assert parse(shipment_parser(), form).value.notes == 'Ring twice'

    def test_typing_card_number_in_shipment(self):
        """Test masking works through the composed form."""
        path = find_paths(shipment_form(), CardField(CardId.NUMBER))[0]
        form, _ = parse_update(shipment_parser(), TextChanged(path, '45321234567890'), shipment_form())
        assert get_at(form, path).text == '4532 1234 5678 90'
        assert get_at(form, path).attrs.selection_start == 17

    def test_validate_marks_every_leaf(self):
        """Test a full validation marks the filled form valid."""
        form, result = parse_validate(shipment_parser(), filled_shipment())
        assert result.is_ok
        statuses = {get_at(form, path).attrs.status for path in (
            (0, 0), (1, 1), (2, 2, 1), (3,),
        )}
        assert statuses == {FieldStatus.VALID}

    def test_json_projection(self):
        """Test the shipment projects to nested JSON by name."""
        data = to_json(filled_shipment())
        assert data['card']['number'] == '4532123456789012'
        assert data['recipient']['phones'] == ['555-1234', '555-9876']
        assert data['packages'] == 1
        assert data['notes'] is None

    @pytest.mark.parametrize('part', ['address', 'card', 'recipient'])
    def test_sub_forms_are_named(self, part):
        """Test each sub-form keeps its own JSON key."""
        assert part in to_json(shipment_form())
