"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTermsError(DomainException):
    """Loan terms violate the scheduler's input contract"""

    pass


class InvalidAmountError(DomainException):
    """Money input is negative, non-finite or unparsable"""

    pass


class FeePolicyError(DomainException):
    """Platform fee configuration was rejected at load time"""

    pass
