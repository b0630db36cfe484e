from enum import Enum


class ServicePrincipalName(Enum):
    LAMBDA = 'lambda.amazonaws.com'
