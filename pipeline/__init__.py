from aws_cdk import Annotations, Environment
from aws_cdk.aws_iam import PolicyStatement
from aws_cdk.pipelines import CodeBuildStep, ManualApprovalStep
from constructs import Construct

from common_constructs.ssm_context import SSMContext
from common_constructs.stack import Stack
from pipeline.landing_zone_pipeline import LandingZonePipeline
from pipeline.landing_zone_stage import LandingZoneStage

PIPELINE_NAME = 'AWSBootstrapKit-LandingZone'
PIPELINE_CONTEXT_PARAMETER_NAME = 'landing-zone-pipeline-context'
PIPELINE_CONTEXT_FALLBACK_FILE = 'cdk.context.pipeline-example.json'
PROD_ENVIRONMENT_NAME = 'prod'

# The role Organizations creates in every member account, trusted by the management account
ORGANIZATION_ACCOUNT_ACCESS_ROLE_NAME = 'OrganizationAccountAccessRole'


class LandingZonePipelineStack(Stack):
    """
    The pipeline that deploys the landing zone, and then CDK-bootstraps every account in it.

    The Prod stage is held behind a manual 'Validate' approval, so the organization changes in a change set can be
    reviewed before they are executed.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        env: Environment,
        landing_zone_config: dict,
        **kwargs,
    ):
        super().__init__(scope, construct_id, env=env, **kwargs)

        self.pipeline_context = SSMContext(
            self,
            'PipelineContext',
            parameter_name=PIPELINE_CONTEXT_PARAMETER_NAME,
            fallback_context_file=PIPELINE_CONTEXT_FALLBACK_FILE,
            required_keys=('github_repo_string', 'branch', 'connection_arn'),
        )
        self.regions_to_bootstrap = landing_zone_config.get('regions_to_bootstrap', [])

        self.pipeline = LandingZonePipeline(
            self,
            'Pipeline',
            pipeline_name=PIPELINE_NAME,
            github_repo_string=self.pipeline_context.context['github_repo_string'],
            branch=self.pipeline_context.context['branch'],
            connection_arn=self.pipeline_context.context['connection_arn'],
            ssm_parameter=self.pipeline_context.parameter,
        )

        self.prod_stage = LandingZoneStage(
            self,
            'Prod',
            env=env,
            environment_name=PROD_ENVIRONMENT_NAME,
            landing_zone_config=landing_zone_config,
        )
        self.pipeline.add_stage(
            self.prod_stage,
            pre=[ManualApprovalStep('Validate', comment='Review the organization change set before deploying it')],
            post=[self._bootstrap_accounts_step()],
        )
        self.pipeline.build_pipeline()

        if self.regions_to_bootstrap:
            Annotations.of(self).add_info(
                f'Accounts will be CDK-bootstrapped in: {", ".join(self.regions_to_bootstrap)}'
            )

    def _bootstrap_accounts_step(self) -> CodeBuildStep:
        return CodeBuildStep(
            'CDKBootstrapAccounts',
            input=self.pipeline.source,
            commands=[
                'npm install -g aws-cdk',
                'python -m pip install boto3',
                f'REGIONS_TO_BOOTSTRAP="{" ".join(self.regions_to_bootstrap)}"',
                'python bin/auto_bootstrap.py $REGIONS_TO_BOOTSTRAP',
            ],
            role_policy_statements=[
                PolicyStatement(
                    actions=['organizations:ListAccounts', 'sts:AssumeRole'],
                    resources=[f'arn:{self.partition}:iam::*:role/{ORGANIZATION_ACCOUNT_ACCESS_ROLE_NAME}'],
                ),
                PolicyStatement(
                    # ListAccounts does not support resource-level permissions
                    actions=['organizations:ListAccounts'],
                    resources=['*'],
                ),
            ],
        )
