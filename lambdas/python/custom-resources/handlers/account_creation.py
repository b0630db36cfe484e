#!/usr/bin/env python3
from aws_lambda_powertools.utilities.typing import LambdaContext
from config import config, logger
from exceptions import AccountCreationException

# Resource properties that are stored on the account as tags of the same name
TAGGED_PROPERTIES = ('AccountType', 'StageName', 'StageOrder', 'HostedServices')


def on_event(event: dict, context: LambdaContext):  # noqa: ARG001 unused-argument
    """CloudFormation event handler using the CDK provider framework.
    See: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.custom_resources/README.html

    This custom resource requests the creation of an account in the organization. Account creation is asynchronous,
    so this only starts it: the is_complete handler reports when the account actually exists.

    This custom resource is defined in the CDK app within the 'Account' construct of the organization stack.

    :param event: The custom resource event, with Email, AccountName and optional tag properties
    :param context:
    :return: The create-account request ID as the physical resource ID on create, the account ID as Data on update
    """
    properties = event['ResourceProperties']
    request_type = event['RequestType']
    logger.info('Entering account creation handler', request_type=request_type, account_name=properties['AccountName'])
    match request_type:
        case 'Create':
            return create_account(properties)
        case 'Update':
            return update_account(event['PhysicalResourceId'], properties, event['OldResourceProperties'])
        case 'Delete':
            # Accounts are retained: closing an account is a deliberate, manual operation
            logger.warning(
                'Account removed from the landing zone but left open',
                account_name=properties['AccountName'],
            )
            return None
        case _:
            raise ValueError(f'Unexpected request type: {request_type}')


def is_complete(event: dict, context: LambdaContext):  # noqa: ARG001 unused-argument
    """Provider framework completion check, polled until the account creation request settles.

    :param event: The custom resource event, including the PhysicalResourceId returned by on_event
    :param context:
    :return: IsComplete, with the new AccountId as Data once the account exists
    """
    request_type = event['RequestType']
    match request_type:
        case 'Create':
            return _check_create_account_status(event['PhysicalResourceId'])
        case 'Update' | 'Delete':
            return {'IsComplete': True}
        case _:
            raise ValueError(f'Unexpected request type: {request_type}')


def create_account(properties: dict) -> dict:
    response = config.organizations_client.create_account(
        Email=properties['Email'],
        AccountName=properties['AccountName'],
        Tags=_account_tags(properties),
    )
    request_id = response['CreateAccountStatus']['Id']
    logger.info('Account creation requested', account_name=properties['AccountName'], request_id=request_id)
    return {'PhysicalResourceId': request_id}


def update_account(physical_resource_id: str, properties: dict, old_properties: dict) -> dict:
    # The email is the one identifier we know the account by that can't drift, since it can't be changed from here
    account_id = _find_account_id(old_properties['Email'])

    for immutable_property in ('Email', 'AccountName'):
        if properties[immutable_property] != old_properties[immutable_property]:
            logger.warning(
                f'{immutable_property} of an existing account cannot be changed by the landing zone, ignoring',
                account_id=account_id,
            )

    tags = _account_tags(properties)
    if tags:
        config.organizations_client.tag_resource(ResourceId=account_id, Tags=tags)
        logger.info('Account tags updated', account_id=account_id)

    return {'PhysicalResourceId': physical_resource_id, 'Data': {'AccountId': account_id}}


def _check_create_account_status(request_id: str) -> dict:
    status = config.organizations_client.describe_create_account_status(CreateAccountRequestId=request_id)[
        'CreateAccountStatus'
    ]
    state = status['State']
    logger.info('Account creation status', request_id=request_id, state=state)
    match state:
        case 'SUCCEEDED':
            return {'IsComplete': True, 'Data': {'AccountId': status['AccountId']}}
        case 'FAILED':
            error_msg = f'Creation of account {status.get("AccountName")} failed: {status.get("FailureReason")}'
            logger.error(error_msg, request_id=request_id)
            raise AccountCreationException(error_msg)
        case _:
            return {'IsComplete': False}


def _find_account_id(email: str) -> str:
    paginator = config.organizations_client.get_paginator('list_accounts')
    for page in paginator.paginate():
        for account in page['Accounts']:
            if account['Email'].lower() == email.lower():
                return account['Id']
    raise AccountCreationException(f'No account found in the organization with email {email}')


def _account_tags(properties: dict) -> list[dict]:
    # Custom resource properties arrive from CloudFormation as strings
    return [{'Key': key, 'Value': str(properties[key])} for key in TAGGED_PROPERTIES if key in properties]
