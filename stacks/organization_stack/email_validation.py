import os

from aws_cdk import CustomResource, Duration
from aws_cdk.aws_iam import PolicyStatement
from aws_cdk.aws_logs import RetentionDays
from aws_cdk.custom_resources import Provider
from cdk_nag import NagSuppressions
from constructs import Construct

from common_constructs.python_function import PythonFunction


class EmailValidation(Construct):
    """
    Makes sure the landing zone contact email actually receives mail before any account is created with an alias
    of it.

    SES sends a verification link to the address, then the provider framework polls until the link has been
    followed. Deployment is held until then, up to the provider's total timeout.
    """

    def __init__(self, scope: Construct, construct_id: str, *, email: str):
        super().__init__(scope, construct_id)

        self.on_event_function = PythonFunction(
            self,
            'OnEventFunction',
            lambda_dir='custom-resources',
            index=os.path.join('handlers', 'email_validation.py'),
            handler='on_event',
            description='Sends an SES verification request to the landing zone contact email',
            timeout=Duration.minutes(1),
            memory_size=128,
        )
        self.on_event_function.add_to_role_policy(
            PolicyStatement(
                actions=['ses:VerifyEmailIdentity'],
                resources=['*'],
            )
        )

        self.is_complete_function = PythonFunction(
            self,
            'IsCompleteFunction',
            lambda_dir='custom-resources',
            index=os.path.join('handlers', 'email_validation.py'),
            handler='is_complete',
            description='Checks whether the landing zone contact email has been verified',
            timeout=Duration.minutes(1),
            memory_size=128,
        )
        self.is_complete_function.add_to_role_policy(
            PolicyStatement(
                # SES doesn't support resource-level permissions for this action
                actions=['ses:GetIdentityVerificationAttributes'],
                resources=['*'],
            )
        )

        self.provider = Provider(
            self,
            'Provider',
            on_event_handler=self.on_event_function,
            is_complete_handler=self.is_complete_function,
            query_interval=Duration.seconds(30),
            total_timeout=Duration.hours(2),
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

        self.email_validation_resource = CustomResource(
            self,
            'Resource',
            resource_type='Custom::EmailValidation',
            service_token=self.provider.service_token,
            properties={
                'Email': email,
            },
        )
