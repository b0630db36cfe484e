from aws_cdk.aws_iam import PolicyStatement
from aws_cdk.custom_resources import (
    AwsCustomResource,
    AwsCustomResourcePolicy,
    AwsSdkCall,
    PhysicalResourceId,
)
from constructs import Construct

# Organizations is a global service whose API endpoint lives in us-east-1
ORGANIZATIONS_REGION = 'us-east-1'


class Organization(Construct):
    """
    Creates the AWS Organization with the deploying account as its management account.

    The organization is created through an AWS SDK call rather than the AWS::Organizations::Organization resource
    type so that the root ID can be read from the same stack that creates it.
    """

    def __init__(self, scope: Construct, construct_id: str):
        super().__init__(scope, construct_id)

        self.organization_resource = AwsCustomResource(
            self,
            'Resource',
            resource_type='Custom::AWS',
            on_create=AwsSdkCall(
                service='Organizations',
                action='createOrganization',
                physical_resource_id=PhysicalResourceId.from_response('Organization.Id'),
                region=ORGANIZATIONS_REGION,
            ),
            on_delete=AwsSdkCall(
                service='Organizations',
                action='deleteOrganization',
                region=ORGANIZATIONS_REGION,
            ),
            policy=AwsCustomResourcePolicy.from_statements(
                [
                    PolicyStatement(
                        actions=[
                            'organizations:CreateOrganization',
                            'organizations:DeleteOrganization',
                            # Creating an organization creates its service-linked role
                            'iam:CreateServiceLinkedRole',
                        ],
                        resources=['*'],
                    )
                ]
            ),
            install_latest_aws_sdk=False,
        )
        self.organization_id = self.organization_resource.get_response_field('Organization.Id')


class OrganizationRoot(Construct):
    """Looks up the root of the organization, the parent of every top-level organizational unit"""

    def __init__(self, scope: Construct, construct_id: str, *, organization: Organization):
        super().__init__(scope, construct_id)

        list_roots = AwsSdkCall(
            service='Organizations',
            action='listRoots',
            physical_resource_id=PhysicalResourceId.from_response('Roots.0.Id'),
            region=ORGANIZATIONS_REGION,
        )
        self.root_resource = AwsCustomResource(
            self,
            'Resource',
            resource_type='Custom::AWS',
            on_create=list_roots,
            on_update=list_roots,
            policy=AwsCustomResourcePolicy.from_sdk_calls(resources=AwsCustomResourcePolicy.ANY_RESOURCE),
            install_latest_aws_sdk=False,
        )
        self.root_resource.node.add_dependency(organization)
        self.root_id = self.root_resource.get_response_field('Roots.0.Id')
