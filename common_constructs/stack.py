from textwrap import dedent

from aws_cdk import Aspects
from aws_cdk import Stack as CdkStack
from cdk_nag import AwsSolutionsChecks, NagSuppressions


class StandardTags(dict):
    """Enforces three required tags for all stacks"""

    def __init__(self, *, project: str, service: str, environment: str, **kwargs):
        super().__init__(Project=project, Service=service, Environment=environment, **kwargs)


class Stack(CdkStack):
    def __init__(self, *args, standard_tags: StandardTags, environment_name: str, **kwargs):
        super().__init__(*args, tags=standard_tags, **kwargs)
        self.environment_name = environment_name
        # AWS-recommended rule set for best practice
        Aspects.of(self).add(AwsSolutionsChecks())

        NagSuppressions.add_stack_suppressions(
            self,
            suppressions=[
                {
                    'id': 'AwsSolutions-IAM5',
                    'reason': dedent("""
                    The Organizations, Route53 and SES APIs this app drives at deploy time either do not support
                    resource-level permissions or operate on resources (accounts, organizational units, create-account
                    requests) whose identifiers are only known after they are created. Wildcards are scoped to the
                    specific actions each role needs.
                    """),
                },
                {
                    'id': 'AwsSolutions-IAM4',
                    'appliesTo': [
                        'Policy::arn:<AWS::Partition>:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole'
                    ],
                    'reason': 'This policy is what the CDK custom resource framework functions need to write logs',
                },
                {
                    'id': 'AwsSolutions-L1',
                    'reason': 'We do not control the runtime of the CDK custom resource framework functions',
                },
            ],
        )
