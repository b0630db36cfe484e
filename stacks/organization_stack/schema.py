# ruff: noqa: ARG002 unused-kwargs
from enum import StrEnum

from marshmallow import RAISE, Schema, ValidationError, validates_schema
from marshmallow.fields import Boolean, Email, Integer, List, Nested, String
from marshmallow.validate import Length, OneOf, Range, Regexp

# Account names end up as DNS labels and as part of email aliases, so we keep them to a conservative character set
ACCOUNT_NAME_PATTERN = r'^[A-Za-z0-9][A-Za-z0-9-]{0,62}$'
# Two or more dot-separated DNS labels, without a trailing dot
DOMAIN_NAME_PATTERN = r'^(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))+$'


class AccountType(StrEnum):
    CICD = 'CICD'
    STAGE = 'STAGE'
    PLAYGROUND = 'PLAYGROUND'


class StrictSchema(Schema):
    """Base Schema explicitly stating what we do if unknown fields are included - raise an error"""

    class Meta:
        unknown = RAISE


class AccountSchema(StrictSchema):
    name = String(required=True, allow_none=False, validate=Regexp(ACCOUNT_NAME_PATTERN))
    type = String(required=False, allow_none=False, validate=OneOf([e.value for e in AccountType]))
    stage_name = String(required=False, allow_none=False, validate=Length(min=1))
    stage_order = Integer(required=False, allow_none=False, strict=True, validate=Range(min=1))
    hosted_services = List(String(required=True, allow_none=False), required=False, allow_none=False)
    email = Email(required=False, allow_none=False)

    @validates_schema
    def validate_stage_order(self, data, **kwargs):
        if 'stage_order' in data and 'stage_name' not in data:
            raise ValidationError('stage_order requires a stage_name', field_name='stage_order')


class OrganizationalUnitSchema(StrictSchema):
    name = String(required=True, allow_none=False, validate=Length(min=1, max=128))
    accounts = List(Nested(AccountSchema()), required=False, allow_none=False, load_default=list)
    nested_ou = List(
        Nested(lambda: OrganizationalUnitSchema()), required=False, allow_none=False, load_default=list
    )

    @validates_schema
    def validate_unique_child_names(self, data, **kwargs):
        _check_unique_ou_names(data.get('nested_ou', []), field_name='nested_ou')


class LandingZoneConfigSchema(StrictSchema):
    """The whole landing zone: the OU tree plus organization-wide options"""

    email = Email(required=True, allow_none=False)
    nested_ou = List(Nested(OrganizationalUnitSchema()), required=True, allow_none=False, validate=Length(min=1))
    root_hosted_zone_dns_name = String(
        required=False, allow_none=True, load_default=None, validate=Regexp(DOMAIN_NAME_PATTERN)
    )
    force_email_verification = Boolean(required=False, allow_none=False, load_default=True)
    regions_to_bootstrap = List(String(required=True, allow_none=False), required=False, load_default=list)

    @validates_schema
    def validate_tree(self, data, **kwargs):
        _check_unique_ou_names(data.get('nested_ou', []), field_name='nested_ou')

        seen = set()
        duplicates = set()
        for account in iter_accounts(data.get('nested_ou', [])):
            if account['name'] in seen:
                duplicates.add(account['name'])
            seen.add(account['name'])
        if duplicates:
            raise ValidationError(f'Duplicate account names: {", ".join(sorted(duplicates))}', field_name='nested_ou')


def _check_unique_ou_names(organizational_units: list[dict], *, field_name: str):
    names = [ou['name'] for ou in organizational_units]
    if len(names) != len(set(names)):
        raise ValidationError(f'Sibling organizational unit names must be unique: {names}', field_name=field_name)


def iter_accounts(organizational_units: list[dict]):
    """Depth-first walk over every account in an OU tree"""
    for ou in organizational_units:
        yield from ou.get('accounts', [])
        yield from iter_accounts(ou.get('nested_ou', []))
