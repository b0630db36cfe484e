from __future__ import annotations

from aws_cdk import ArnFormat, Stack
from aws_cdk.aws_codebuild import BuildSpec
from aws_cdk.aws_codepipeline import PipelineType
from aws_cdk.aws_iam import Effect, PolicyStatement
from aws_cdk.aws_ssm import IParameter
from aws_cdk.pipelines import CodeBuildOptions, CodeBuildStep, CodePipelineSource
from aws_cdk.pipelines import CodePipeline as CdkCodePipeline
from cdk_nag import NagSuppressions
from constructs import Construct


class LandingZonePipeline(CdkCodePipeline):
    """
    Self-mutating pipeline that deploys the landing zone from its GitHub repository.

    Source is pulled through a CodeStar connection, then the app is synthesized with the same context the
    pipeline stack was deployed with: the connection settings are read back from the SSM parameter at synth time.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        pipeline_name: str,
        github_repo_string: str,
        branch: str,
        connection_arn: str,
        ssm_parameter: IParameter,
        **kwargs,
    ):
        self.source = CodePipelineSource.connection(
            repo_string=github_repo_string,
            branch=branch,
            # Arn format:
            # arn:aws:codeconnections:us-east-1:111122223333:connection/<uuid>
            connection_arn=connection_arn,
        )
        super().__init__(
            scope,
            construct_id,
            pipeline_name=pipeline_name,
            pipeline_type=PipelineType.V2,
            synth=CodeBuildStep(
                'Synth',
                input=self.source,
                commands=[
                    'npm install -g aws-cdk',
                    'python -m pip install -e .',
                    'cdk synth',
                ],
            ),
            synth_code_build_defaults=CodeBuildOptions(
                partial_build_spec=BuildSpec.from_object(
                    {
                        'phases': {
                            'install': {
                                'runtime-versions': {'python': '3.13', 'nodejs': '22.x'},
                            }
                        }
                    }
                ),
            ),
            cross_account_keys=True,
            enable_key_rotation=True,
            **kwargs,
        )
        self._ssm_parameter = ssm_parameter

    def build_pipeline(self) -> None:
        super().build_pipeline()

        self._ssm_parameter.grant_read(self.synth_project)

        stack = Stack.of(self)
        # Synth reads the pipeline context parameter through a context lookup, which runs through the lookup role
        self.synth_project.add_to_role_policy(
            PolicyStatement(
                effect=Effect.ALLOW,
                actions=['sts:AssumeRole'],
                resources=[
                    stack.format_arn(
                        partition=stack.partition,
                        service='iam',
                        region='',
                        account=stack.account,
                        resource='role',
                        resource_name='cdk-hnb659fds-lookup-role-*',
                        arn_format=ArnFormat.SLASH_RESOURCE_NAME,
                    ),
                ],
            )
        )

        NagSuppressions.add_resource_suppressions_by_path(
            stack,
            self.node.path,
            suppressions=[
                {
                    'id': 'AwsSolutions-IAM5',
                    'reason': 'The wildcarded actions and resources are still scoped to the specific actions, bucket,'
                    ' key, and codebuild resources the pipeline specifically needs access to.',
                },
                {
                    'id': 'AwsSolutions-CB4',
                    'reason': 'Build artifacts are encrypted with the pipeline artifact bucket key',
                },
                {
                    'id': 'AwsSolutions-S1',
                    'reason': 'The artifact bucket only holds intermediate build artifacts that are reproduced on'
                    ' deploy',
                },
            ],
            apply_to_children=True,
        )
