from aws_cdk.custom_resources import (
    AwsCustomResource,
    AwsCustomResourcePolicy,
    AwsSdkCall,
    PhysicalResourceId,
    PhysicalResourceIdReference,
)
from constructs import Construct

from stacks.organization_stack.organization import ORGANIZATIONS_REGION


class OrganizationalUnit(Construct):
    """An organizational unit, placed under either the organization root or another organizational unit"""

    def __init__(self, scope: Construct, construct_id: str, *, name: str, parent_id: str):
        super().__init__(scope, construct_id)
        self.name = name

        self.organizational_unit_resource = AwsCustomResource(
            self,
            'Resource',
            resource_type='Custom::AWS',
            on_create=AwsSdkCall(
                service='Organizations',
                action='createOrganizationalUnit',
                physical_resource_id=PhysicalResourceId.from_response('OrganizationalUnit.Id'),
                region=ORGANIZATIONS_REGION,
                parameters={
                    'Name': name,
                    'ParentId': parent_id,
                },
            ),
            on_update=AwsSdkCall(
                service='Organizations',
                action='updateOrganizationalUnit',
                physical_resource_id=PhysicalResourceId.from_response('OrganizationalUnit.Id'),
                region=ORGANIZATIONS_REGION,
                parameters={
                    'Name': name,
                    'OrganizationalUnitId': PhysicalResourceIdReference(),
                },
            ),
            on_delete=AwsSdkCall(
                service='Organizations',
                action='deleteOrganizationalUnit',
                region=ORGANIZATIONS_REGION,
                parameters={
                    'OrganizationalUnitId': PhysicalResourceIdReference(),
                },
            ),
            policy=AwsCustomResourcePolicy.from_sdk_calls(resources=AwsCustomResourcePolicy.ANY_RESOURCE),
            install_latest_aws_sdk=False,
        )
        self.organizational_unit_id = self.organizational_unit_resource.get_response_field('OrganizationalUnit.Id')
