"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidProfileError(DomainException):
    """Financial profile input is missing, non-numeric or out of range"""

    pass


class AssessmentNotFoundError(DomainException):
    """Assessment does not exist or belongs to another account"""

    pass


class AuthError(DomainException):
    """Base for authentication failures; messages stay generic"""

    pass


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password"""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class InvalidChallengeCodeError(AuthError):
    """MFA code did not match"""

    def __init__(self, message: str = "Invalid verification code"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    """Session token is malformed, expired or refers to a removed account"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class EmailAlreadyRegisteredError(DomainException):
    """Signup attempted with an email that already has an account"""

    pass


class EmailDeliveryError(DomainException):
    """Mail transport rejected or could not send a message"""

    pass
