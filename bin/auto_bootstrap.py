#!/usr/bin/env python3
# ruff: noqa: T201 we use print statements for local scripts
"""CDK-bootstrap every member account of the organization in the given regions.

Run from the organization's management account, with credentials allowed to list the organization's accounts and
assume the OrganizationAccountAccessRole in each of them:
    python bin/auto_bootstrap.py eu-west-1 us-east-1

Each account is bootstrapped with a trust to the management account, so pipelines there can deploy into it.
"""

import argparse
import os
import subprocess

import boto3

ORGANIZATION_ACCOUNT_ACCESS_ROLE_NAME = 'OrganizationAccountAccessRole'
CLOUDFORMATION_EXECUTION_POLICY = 'arn:aws:iam::aws:policy/AdministratorAccess'


def list_member_accounts(organizations_client, management_account_id: str) -> list[dict]:
    """All active accounts of the organization, except the management account itself"""
    accounts = []
    paginator = organizations_client.get_paginator('list_accounts')
    for page in paginator.paginate():
        accounts.extend(
            account
            for account in page['Accounts']
            if account['Status'] == 'ACTIVE' and account['Id'] != management_account_id
        )
    return accounts


def assume_account_role(sts_client, account_id: str) -> dict:
    response = sts_client.assume_role(
        RoleArn=f'arn:aws:iam::{account_id}:role/{ORGANIZATION_ACCOUNT_ACCESS_ROLE_NAME}',
        RoleSessionName=f'cdk-bootstrap-{account_id}',
    )
    return response['Credentials']


def bootstrap_command(account_id: str, region: str, management_account_id: str) -> list[str]:
    return [
        'cdk',
        'bootstrap',
        f'aws://{account_id}/{region}',
        '--trust',
        management_account_id,
        '--cloudformation-execution-policies',
        CLOUDFORMATION_EXECUTION_POLICY,
    ]


def bootstrap_account(account: dict, regions: list[str], *, sts_client, management_account_id: str):
    credentials = assume_account_role(sts_client, account['Id'])
    env = {
        **os.environ,
        'AWS_ACCESS_KEY_ID': credentials['AccessKeyId'],
        'AWS_SECRET_ACCESS_KEY': credentials['SecretAccessKey'],
        'AWS_SESSION_TOKEN': credentials['SessionToken'],
    }
    for region in regions:
        print(f'Bootstrapping {account["Name"]} ({account["Id"]}) in {region}')
        subprocess.run(bootstrap_command(account['Id'], region, management_account_id), env=env, check=True)


def main():
    parser = argparse.ArgumentParser(description='CDK-bootstrap every member account of the organization')
    parser.add_argument('regions', nargs='*', help='Regions to bootstrap in every account')
    args = parser.parse_args()
    if not args.regions:
        print('No regions to bootstrap')
        return

    sts_client = boto3.client('sts')
    organizations_client = boto3.client('organizations')
    management_account_id = sts_client.get_caller_identity()['Account']

    accounts = list_member_accounts(organizations_client, management_account_id)
    print(f'Bootstrapping {len(accounts)} accounts in {", ".join(args.regions)}')
    for account in accounts:
        bootstrap_account(account, args.regions, sts_client=sts_client, management_account_id=management_account_id)


if __name__ == '__main__':
    main()
