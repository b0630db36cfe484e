from unittest.mock import patch

import boto3
from moto import mock_aws

from tests import TstLambdas


@mock_aws
class TstFunction(TstLambdas):
    """
    Base class to set up Moto mocking and create mock AWS resources for functional testing
    """

    def setUp(self):
        super().setUp()

        # A fresh config object, so boto3 clients are created inside this test's mock
        import config

        self.config = config._Config()  # pylint: disable=protected-access
        for handler_module in ('handlers.account_creation', 'handlers.email_validation'):
            patcher = patch(f'{handler_module}.config', self.config)
            patcher.start()
            self.addCleanup(patcher.stop)

        self.build_resources()

    def build_resources(self):
        self.organizations_client = boto3.client('organizations', region_name='us-east-1')
        self.organization = self.organizations_client.create_organization(FeatureSet='ALL')['Organization']
        self.ses_client = boto3.client('ses')
