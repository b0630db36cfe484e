#!/usr/bin/env python3
from aws_lambda_powertools.utilities.typing import LambdaContext
from config import config, logger
from exceptions import EmailValidationException


def on_event(event: dict, context: LambdaContext):  # noqa: ARG001 unused-argument
    """CloudFormation event handler using the CDK provider framework.

    Asks SES to send a verification link to the landing zone contact email. The is_complete handler then holds the
    deployment until the link has been followed.

    :param event: The custom resource event, with the Email property
    :param context:
    :return: The email address as the physical resource ID
    """
    properties = event['ResourceProperties']
    request_type = event['RequestType']
    logger.info('Entering email validation handler', request_type=request_type)
    match request_type:
        case 'Create' | 'Update':
            return request_verification(properties['Email'])
        case 'Delete':
            # Leaving the identity in place does no harm, and another stack may rely on it
            return None
        case _:
            raise ValueError(f'Unexpected request type: {request_type}')


def is_complete(event: dict, context: LambdaContext):  # noqa: ARG001 unused-argument
    request_type = event['RequestType']
    match request_type:
        case 'Create' | 'Update':
            return {'IsComplete': is_email_verified(event['ResourceProperties']['Email'])}
        case 'Delete':
            return {'IsComplete': True}
        case _:
            raise ValueError(f'Unexpected request type: {request_type}')


def request_verification(email: str) -> dict:
    config.ses_client.verify_email_identity(EmailAddress=email)
    logger.info('Verification email sent', email=email)
    return {'PhysicalResourceId': email}


def is_email_verified(email: str) -> bool:
    response = config.ses_client.get_identity_verification_attributes(Identities=[email])
    attributes = response.get('VerificationAttributes', {}).get(email, {})
    verification_status = attributes.get('VerificationStatus', 'NotStarted')
    logger.info(f'Verification status for {email}: {verification_status}')

    if verification_status == 'Success':
        return True
    if verification_status == 'Failed':
        error_msg = f'Verification of {email} failed'
        logger.error(error_msg)
        raise EmailValidationException(error_msg)
    return False
