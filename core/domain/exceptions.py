"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotFoundError(DomainException):
    """Base exception for records that do not exist."""

    pass


class ConflictError(DomainException):
    """Base exception for unique-constraint violations."""

    pass


class AuthenticationError(DomainException):
    """Base exception for failed authentication."""

    pass


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(NotFoundError, LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class InvalidLicenseKeyError(NotFoundError, LicenseException):
    """Raised when no license matches a presented license key."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_LICENSE_KEY")


class DuplicateLicenseKeyError(ConflictError, LicenseException):
    """Raised when a license key is already taken."""

    def __init__(self, message: str = "License key already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE_KEY")


class LicenseExpiredError(LicenseException):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="EXPIRED_LICENSE")


class LicenseInactiveError(LicenseException):
    """Raised when a license is not funded and cannot be used."""

    def __init__(self, message: str = "License is inactive"):
        super().__init__(message, code="LICENSE_INACTIVE")


class InvalidLicenseStatusError(LicenseException):
    """Raised when a license status value is not recognised."""

    def __init__(self, message: str = "Invalid license status"):
        super().__init__(message, code="INVALID_LICENSE_STATUS")


class CatalogException(DomainException):
    """Base exception for product and plan errors."""

    pass


class ProductNotFoundError(NotFoundError, CatalogException):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class PlanNotFoundError(NotFoundError, CatalogException):
    """Raised when a plan is not found."""

    def __init__(self, message: str = "Plan not found"):
        super().__init__(message, code="PLAN_NOT_FOUND")


class PlanProductMismatchError(CatalogException):
    """Raised when a plan does not belong to the given product."""

    def __init__(self, message: str = "Plan does not belong to product"):
        super().__init__(message, code="PLAN_PRODUCT_MISMATCH")


class BillingException(DomainException):
    """Base exception for invoice-related errors."""

    pass


class InvoiceNotFoundError(NotFoundError, BillingException):
    """Raised when an invoice is not found."""

    def __init__(self, message: str = "Invoice not found"):
        super().__init__(message, code="INVOICE_NOT_FOUND")


class CompanyNotFoundError(NotFoundError, BillingException):
    """Raised when a company is not found."""

    def __init__(self, message: str = "Company not found"):
        super().__init__(message, code="COMPANY_NOT_FOUND")


class BankNotFoundError(NotFoundError, BillingException):
    """Raised when a bank account is not found."""

    def __init__(self, message: str = "Bank not found"):
        super().__init__(message, code="BANK_NOT_FOUND")


class DuplicateInvoiceNumberError(ConflictError, BillingException):
    """Raised when an invoice number is already taken."""

    def __init__(self, message: str = "Invoice number already exists"):
        super().__init__(message, code="DUPLICATE_INVOICE_NUMBER")


class InvalidLineItemError(BillingException):
    """Raised when an invoice line item breaks a validation rule."""

    def __init__(self, message: str = "Invalid line item"):
        super().__init__(message, code="INVALID_LINE_ITEM")


class DeviceException(DomainException):
    """Base exception for device-related errors."""

    pass


class DeviceNotFoundError(NotFoundError, DeviceException):
    """Raised when a device is not found."""

    def __init__(self, message: str = "Device not found"):
        super().__init__(message, code="DEVICE_NOT_FOUND")


class DeviceLimitReachedError(DeviceException):
    """Raised when a license has no free device slots."""

    def __init__(self, message: str = "Device limit reached for this license"):
        super().__init__(message, code="DEVICE_LIMIT_REACHED")


class AccountException(DomainException):
    """Base exception for user account errors."""

    pass


class UserNotFoundError(NotFoundError, AccountException):
    """Raised when a user is not found."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="USER_NOT_FOUND")


class InvalidCredentialsError(AuthenticationError, AccountException):
    """Raised when an email and password pair does not match."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidTokenError(AuthenticationError, AccountException):
    """Raised when a bearer token is malformed, expired or of the wrong type."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")
