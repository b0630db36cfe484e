class LZBaseException(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AccountCreationException(LZBaseException):
    """Organizations reported that an account could not be created"""


class EmailValidationException(LZBaseException):
    """SES reported that the contact email could not be verified"""
