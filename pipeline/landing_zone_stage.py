from aws_cdk import Stage
from constructs import Construct

from common_constructs.stack import StandardTags
from stacks.organization_stack import AwsOrganizationsStack


class LandingZoneStage(Stage):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment_name: str,
        landing_zone_config: dict,
        **kwargs,
    ):
        super().__init__(scope, construct_id, **kwargs)

        standard_tags = StandardTags(**self.node.get_context('tags'), environment=environment_name)

        self.org_stack = AwsOrganizationsStack(
            self,
            'orgStack',
            standard_tags=standard_tags,
            environment_name=environment_name,
            **landing_zone_config,
        )
