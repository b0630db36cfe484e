#!/usr/bin/env python3
import os

from aws_cdk import App, Environment

from common_constructs.stack import StandardTags
from pipeline import LandingZonePipelineStack
from pipeline.landing_zone_stage import LandingZoneStage
from stacks.organization_stack.schema import LandingZoneConfigSchema

PIPELINE_STACK = 'LandingZonePipelineStack'


class LandingZoneApp(App):
    """
    AWS Organizations landing zone CDK application

    The landing zone (organization, organizational units, accounts and their DNS sub-zones) is described in the
    `landing_zone` context key and deployed to the organization's management account.

    By default, the app declares the pipeline stack, which deploys the landing zone from its repository and then
    CDK-bootstraps every account in it. Developers can set the `sandbox` context to deploy the landing zone stage
    directly, without a pipeline.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.landing_zone_config = LandingZoneConfigSchema().load(self.node.get_context('landing_zone'))
        self.sandbox_environment = self.node.try_get_context('sandbox')

        # Toggle for developers to deploy to a sandbox account without the pipeline
        if self.sandbox_environment:
            self._setup_sandbox_environment()
        else:
            self._setup_pipeline_environment()

    def _setup_sandbox_environment(self):
        environment_name = self.node.get_context('environment_name')

        self.sandbox_stage = LandingZoneStage(
            self,
            'Sandbox',
            environment_name=environment_name,
            landing_zone_config=self.landing_zone_config,
        )

    def _setup_pipeline_environment(self):
        self.tags = self.node.get_context('tags')
        self.environment = Environment(
            account=os.environ['CDK_DEFAULT_ACCOUNT'],
            region=os.environ['CDK_DEFAULT_REGION'],
        )

        self.pipeline_stack = LandingZonePipelineStack(
            self,
            PIPELINE_STACK,
            env=self.environment,
            standard_tags=StandardTags(**self.tags, environment='pipeline'),
            environment_name='pipeline',
            landing_zone_config=self.landing_zone_config,
        )


if __name__ == '__main__':
    app = LandingZoneApp()
    app.synth()
