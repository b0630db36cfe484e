from __future__ import annotations

import os

from aws_cdk import Duration
from aws_cdk.aws_iam import IRole, Role, ServicePrincipal
from aws_cdk.aws_lambda import Runtime
from aws_cdk.aws_lambda_python_alpha import PythonFunction as CdkPythonFunction
from aws_cdk.aws_logs import ILogGroup, LogGroup, RetentionDays
from constructs import Construct

from common_constructs.service_principal_name import ServicePrincipalName


class PythonFunction(CdkPythonFunction):
    """
    Standard Python lambda function.

    Code is taken from `lambdas/python/<lambda_dir>`, relative to the CDK app directory.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        lambda_dir: str,
        runtime: Runtime = Runtime.PYTHON_3_13,
        log_retention: RetentionDays = RetentionDays.ONE_MONTH,
        role: IRole = None,
        log_group: ILogGroup = None,
        **kwargs,
    ):
        defaults = {
            'timeout': Duration.seconds(28),
        }
        defaults.update(kwargs)

        if not log_group:
            log_group = LogGroup(
                scope,
                f'{construct_id}LogGroup',
                retention=log_retention,
            )

        if not role:
            role = Role(
                scope,
                f'{construct_id}Role',
                assumed_by=ServicePrincipal(ServicePrincipalName.LAMBDA.value),
            )
            log_group.grant_write(role)
        # We can't directly grant a provided role permission to log to our log group, since that could create a
        # circular dependency with the stack the role came from. The role creator will have to be responsible for
        # setting its permissions.

        super().__init__(
            scope,
            construct_id,
            entry=os.path.join('lambdas', 'python', lambda_dir),
            runtime=runtime,
            log_group=log_group,
            role=role,
            **defaults,
        )
