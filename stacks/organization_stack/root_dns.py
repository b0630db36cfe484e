from aws_cdk.aws_iam import AccountPrincipal, PolicyStatement, Role
from aws_cdk.aws_route53 import HostedZone, NsRecord
from constructs import Construct

from stacks.organization_stack.account import Account


class RootDns(Construct):
    """
    The root DNS domain of the landing zone, with one delegated sub-zone per account.

    Sub-zones are named after their account (`<account name>.<root domain>`) and live in the management account.
    Each account gets a role it can assume to manage records in its own sub-zone.
    """

    def __init__(self, scope: Construct, construct_id: str, *, root_hosted_zone_dns_name: str):
        super().__init__(scope, construct_id)
        self.root_hosted_zone_dns_name = root_hosted_zone_dns_name

        self.root_hosted_zone = HostedZone(
            self,
            'RootHostedZone',
            zone_name=root_hosted_zone_dns_name,
        )
        self.account_hosted_zones: dict[str, HostedZone] = {}

    def add_account_sub_zone(self, account: Account) -> HostedZone:
        sub_zone = HostedZone(
            self,
            f'{account.account_name}SubZone',
            zone_name=f'{account.account_name}.{self.root_hosted_zone_dns_name}',
        )
        NsRecord(
            self,
            f'{account.account_name}SubZoneDelegation',
            zone=self.root_hosted_zone,
            record_name=sub_zone.zone_name,
            values=sub_zone.hosted_zone_name_servers,
        )

        dns_update_role = Role(
            self,
            f'{account.account_name}DnsUpdateRole',
            assumed_by=AccountPrincipal(account.account_id),
            description=f'Lets the {account.account_name} account manage records in {sub_zone.zone_name}',
        )
        dns_update_role.add_to_policy(
            PolicyStatement(
                actions=[
                    'route53:ChangeResourceRecordSets',
                    'route53:GetHostedZone',
                    'route53:ListResourceRecordSets',
                ],
                resources=[sub_zone.hosted_zone_arn],
            )
        )
        dns_update_role.add_to_policy(
            PolicyStatement(
                actions=['route53:GetChange', 'route53:ListHostedZonesByName'],
                resources=['*'],
            )
        )

        self.account_hosted_zones[account.account_name] = sub_zone
        return sub_zone
