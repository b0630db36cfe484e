from __future__ import annotations

import os

from aws_cdk import CustomResource, Duration, Stack
from aws_cdk.aws_iam import PolicyStatement
from aws_cdk.aws_logs import RetentionDays
from aws_cdk.custom_resources import (
    AwsCustomResource,
    AwsCustomResourcePolicy,
    AwsSdkCall,
    PhysicalResourceId,
    Provider,
)
from cdk_nag import NagSuppressions
from constructs import Construct

from common_constructs.python_function import PythonFunction
from stacks.organization_stack.organization import ORGANIZATIONS_REGION
from stacks.organization_stack.schema import AccountType


class AccountProvider(Construct):
    """
    Custom resource provider that creates AWS accounts in the organization.

    Account creation is asynchronous on the Organizations side, so the provider framework polls the is_complete
    handler until the create-account request settles. One provider is shared by every account in a stack.
    """

    CONSTRUCT_ID = 'AccountProvider'

    def __init__(self, scope: Construct, construct_id: str):
        super().__init__(scope, construct_id)

        self.on_event_function = PythonFunction(
            self,
            'OnEventFunction',
            lambda_dir='custom-resources',
            index=os.path.join('handlers', 'account_creation.py'),
            handler='on_event',
            description='Requests creation of AWS accounts in the organization',
            timeout=Duration.minutes(1),
            memory_size=128,
        )
        self.on_event_function.add_to_role_policy(
            PolicyStatement(
                actions=[
                    'organizations:CreateAccount',
                    'organizations:ListAccounts',
                    'organizations:TagResource',
                    'iam:CreateServiceLinkedRole',
                ],
                # CreateAccount does not support resource-level permissions
                resources=['*'],
            )
        )

        self.is_complete_function = PythonFunction(
            self,
            'IsCompleteFunction',
            lambda_dir='custom-resources',
            index=os.path.join('handlers', 'account_creation.py'),
            handler='is_complete',
            description='Checks the status of AWS account creation requests',
            timeout=Duration.minutes(1),
            memory_size=128,
        )
        self.is_complete_function.add_to_role_policy(
            PolicyStatement(
                actions=['organizations:DescribeCreateAccountStatus'],
                resources=['*'],
            )
        )

        self.provider = Provider(
            self,
            'Provider',
            on_event_handler=self.on_event_function,
            is_complete_handler=self.is_complete_function,
            query_interval=Duration.seconds(10),
            total_timeout=Duration.minutes(30),
            log_retention=RetentionDays.ONE_DAY,
        )
        NagSuppressions.add_resource_suppressions(
            self.provider,
            suppressions=[
                {
                    'id': 'AwsSolutions-SF1',
                    'reason': 'The provider framework waiter only polls the is_complete handler, whose own logs record'
                    ' each check',
                },
                {
                    'id': 'AwsSolutions-SF2',
                    'reason': 'The provider framework waiter is a single polling loop, with nothing to trace across'
                    ' services',
                },
            ],
            apply_to_children=True,
        )

    @property
    def service_token(self) -> str:
        return self.provider.service_token

    @classmethod
    def get_or_create(cls, scope: Construct) -> AccountProvider:
        stack = Stack.of(scope)
        existing = stack.node.try_find_child(cls.CONSTRUCT_ID)
        if existing is not None:
            return existing
        return cls(stack, cls.CONSTRUCT_ID)


class Account(Construct):
    """
    An AWS account, created in the organization and then moved under its organizational unit.

    Accounts are never closed by this construct: deleting the resource leaves the account in place.

    The move into the organizational unit only happens when the account is created. Moving an existing account to
    another organizational unit has to be done by hand, since the current parent is not known at deploy time.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        account_name: str,
        email: str,
        parent_organizational_unit_id: str,
        organization_root_id: str,
        account_type: str | None = None,
        stage_name: str | None = None,
        stage_order: int | None = None,
        hosted_services: list[str] | None = None,
    ):
        super().__init__(scope, construct_id)
        self.account_name = account_name
        self.account_type = account_type
        self.stage_name = stage_name
        self.stage_order = stage_order

        properties = {
            'Email': email,
            'AccountName': account_name,
        }
        if account_type is not None:
            properties['AccountType'] = AccountType(account_type).value
        if stage_name is not None:
            properties['StageName'] = stage_name
        if stage_order is not None:
            properties['StageOrder'] = stage_order
        if hosted_services:
            properties['HostedServices'] = ':'.join(hosted_services)

        self.account_resource = CustomResource(
            self,
            'Resource',
            resource_type='Custom::AccountCreation',
            service_token=AccountProvider.get_or_create(self).service_token,
            properties=properties,
        )
        self.account_id = self.account_resource.get_att_string('AccountId')

        self.move_account_resource = AwsCustomResource(
            self,
            'MoveAccount',
            resource_type='Custom::AWS',
            on_create=AwsSdkCall(
                service='Organizations',
                action='moveAccount',
                physical_resource_id=PhysicalResourceId.of(f'{account_name}-placement'),
                region=ORGANIZATIONS_REGION,
                parameters={
                    'AccountId': self.account_id,
                    'DestinationParentId': parent_organizational_unit_id,
                    'SourceParentId': organization_root_id,
                },
            ),
            policy=AwsCustomResourcePolicy.from_sdk_calls(resources=AwsCustomResourcePolicy.ANY_RESOURCE),
            install_latest_aws_sdk=False,
        )
