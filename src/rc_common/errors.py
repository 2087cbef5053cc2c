"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Account
  2xxx: Resident
  3xxx: Charge
  4xxx: Payment gateway
  5xxx: Document
  6xxx: Notification
  9xxx: System

Every error surfaces to the client as {"error": message}; http_status picks
the taxonomy bucket (400 validation/state, 401/403 auth, 404 not found,
500 internal).
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Account ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already registered", 400)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid email or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Refresh token is invalid or expired", 401)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Not authorized") -> None:
        super().__init__(1005, detail, 403)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Administrator role required", 403)


class AccountNotFoundError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(1007, f"Account not found: {account_id}", 404)


class WrongPasswordError(AppError):
    def __init__(self) -> None:
        super().__init__(1008, "Current password is incorrect", 400)


class ResidentProfileRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1009, "This operation requires a resident profile", 403)


# --- 2xxx: Resident ---

class ResidentNotFoundError(AppError):
    def __init__(self, resident_id: str) -> None:
        super().__init__(2001, f"Resident not found: {resident_id}", 404)


class ResidentInactiveError(AppError):
    def __init__(self, resident_id: str) -> None:
        super().__init__(
            2002, f"Cannot create charges for inactive resident {resident_id}", 400
        )


class NoActiveResidentsError(AppError):
    def __init__(self) -> None:
        super().__init__(2003, "There are no active residents to charge", 400)


class HouseNumberExistsError(AppError):
    def __init__(self, house_number: str) -> None:
        super().__init__(2004, f"House number already registered: {house_number}", 400)


# --- 3xxx: Charge ---

class ChargeNotFoundError(AppError):
    def __init__(self, charge_id: str) -> None:
        super().__init__(3001, f"Payment not found: {charge_id}", 404)


class ChargeNotPayableError(AppError):
    def __init__(self, charge_id: str, status: str) -> None:
        super().__init__(
            3002, f"Payment {charge_id} in status {status} cannot be paid", 400
        )


class ChargeNotPaidError(AppError):
    def __init__(self, charge_id: str) -> None:
        super().__init__(3003, f"Payment {charge_id} must be marked as paid first", 400)


class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3004, detail, 400)


# --- 4xxx: Payment gateway ---

class PaymentNotSucceededError(AppError):
    def __init__(self, intent_id: str, status: str) -> None:
        super().__init__(
            4001, f"Payment intent {intent_id} has not succeeded (status={status})", 400
        )


class WebhookSignatureError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "Webhook signature verification failed", 400)


class GatewayError(AppError):
    def __init__(self, detail: str, http_status: int = 400) -> None:
        super().__init__(4003, f"Payment processor error: {detail}", http_status)


class GatewayNotConfiguredError(AppError):
    def __init__(self) -> None:
        super().__init__(4004, "Payment processor is not configured", 500)


# --- 5xxx: Document ---

class DocumentNotFoundError(AppError):
    def __init__(self, document_id: str) -> None:
        super().__init__(5001, f"Document not found: {document_id}", 404)


class StoredFileNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(5002, "File not found on the server", 404)


# --- 6xxx: Notification ---

class NotificationNotFoundError(AppError):
    def __init__(self, notification_id: str) -> None:
        super().__init__(6001, f"Notification not found: {notification_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
