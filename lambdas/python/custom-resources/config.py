import logging
import os
from functools import cached_property

import boto3
from aws_lambda_powertools import Logger

logging.basicConfig()
logger = Logger()
logger.setLevel(logging.DEBUG if os.environ.get('DEBUG', 'false').lower() == 'true' else logging.INFO)


class _Config:
    # Organizations is a global service whose API endpoint lives in us-east-1
    organizations_region = 'us-east-1'

    @cached_property
    def organizations_client(self):
        return boto3.client('organizations', region_name=self.organizations_region)

    @cached_property
    def ses_client(self):
        return boto3.client('ses')


config = _Config()
