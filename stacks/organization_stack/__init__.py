from __future__ import annotations

from aws_cdk import Aws, Fn
from constructs import Construct

from common_constructs.stack import Stack
from stacks.organization_stack.account import Account
from stacks.organization_stack.email_validation import EmailValidation
from stacks.organization_stack.organization import Organization, OrganizationRoot
from stacks.organization_stack.organizational_unit import OrganizationalUnit
from stacks.organization_stack.root_dns import RootDns
from stacks.organization_stack.schema import AccountType, LandingZoneConfigSchema

LANDING_ZONE_VERSION = '1.0.0'


class AwsOrganizationsStack(Stack):
    """
    The landing zone itself: an AWS Organization with a tree of organizational units and accounts.

    This stack must be deployed in the account that will become the organization's management account.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        email: str,
        nested_ou: list[dict],
        root_hosted_zone_dns_name: str | None = None,
        force_email_verification: bool = True,
        regions_to_bootstrap: list[str] | None = None,
        **kwargs,
    ):
        """
        :param email: The landing zone contact email. Each account gets an alias of it, unless the account declares
        its own email.
        :param nested_ou: The organizational unit tree, see LandingZoneConfigSchema.
        :param root_hosted_zone_dns_name: If provided, a root hosted zone with one delegated sub-zone per account.
        :param force_email_verification: Hold account creation until the contact email is verified through SES.
        :param regions_to_bootstrap: Not used by this stack, accepted so the whole landing zone config can be passed.
        """
        super().__init__(scope, construct_id, **kwargs)
        self.landing_zone_config = LandingZoneConfigSchema().load(
            {
                'email': email,
                'nested_ou': nested_ou,
                'root_hosted_zone_dns_name': root_hosted_zone_dns_name,
                'force_email_verification': force_email_verification,
                'regions_to_bootstrap': regions_to_bootstrap or [],
            }
        )
        self.template_options.description = f'AWS Organizations landing zone (version:{LANDING_ZONE_VERSION})'

        self.email = self.landing_zone_config['email']
        self.organizational_units: dict[str, OrganizationalUnit] = {}
        self.accounts: list[Account] = []

        self.organization = Organization(self, 'Organization')
        self.organization_root = OrganizationRoot(
            self,
            'OrganizationRootCustomResource',
            organization=self.organization,
        )

        self.email_validation = None
        if self.landing_zone_config['force_email_verification']:
            self.email_validation = EmailValidation(self, 'EmailValidation', email=self.email)

        # Organizations throttles concurrent account creation, so each account waits for the one before it
        self._previous_account: Account | None = None
        for ou in self.landing_zone_config['nested_ou']:
            self._add_organizational_unit(ou, parent_id=self.organization_root.root_id, path=())

        self.root_dns = None
        if self.landing_zone_config['root_hosted_zone_dns_name']:
            self.root_dns = RootDns(
                self,
                'RootDns',
                root_hosted_zone_dns_name=self.landing_zone_config['root_hosted_zone_dns_name'],
            )
            for account in self.accounts:
                self.root_dns.add_account_sub_zone(account)

    def _add_organizational_unit(self, ou: dict, *, parent_id: str, path: tuple[str, ...]):
        path = (*path, ou['name'])
        organizational_unit = OrganizationalUnit(
            self,
            f'{"-".join(path)}OrganizationalUnit',
            name=ou['name'],
            parent_id=parent_id,
        )
        self.organizational_units['/'.join(path)] = organizational_unit

        for account_config in ou['accounts']:
            self._add_account(account_config, organizational_unit=organizational_unit)

        for child in ou['nested_ou']:
            self._add_organizational_unit(child, parent_id=organizational_unit.organizational_unit_id, path=path)

    def _add_account(self, account_config: dict, *, organizational_unit: OrganizationalUnit):
        account_name = account_config['name']
        account_type = account_config.get('type')
        email = account_config['email'] if 'email' in account_config else self._account_email(account_name)
        account = Account(
            self,
            f'{account_name}Account',
            account_name=account_name,
            email=email,
            parent_organizational_unit_id=organizational_unit.organizational_unit_id,
            organization_root_id=self.organization_root.root_id,
            account_type=AccountType(account_type).value if account_type is not None else None,
            stage_name=account_config.get('stage_name'),
            stage_order=account_config.get('stage_order'),
            hosted_services=account_config.get('hosted_services'),
        )
        if self.email_validation is not None:
            account.node.add_dependency(self.email_validation)
        if self._previous_account is not None:
            account.node.add_dependency(self._previous_account)
        self._previous_account = account
        self.accounts.append(account)

    def _account_email(self, account_name: str) -> str:
        """
        Derive a unique email for an account from the contact email, using a plus alias

        'admin@example.com' becomes 'admin+<account name>-<management account id>@example.com', so the same contact
        can own more than one landing zone.
        """
        local_part, domain = self.email.split('@', 1)
        return Fn.join('', [f'{local_part}+{account_name}-', Aws.ACCOUNT_ID, f'@{domain}'])

