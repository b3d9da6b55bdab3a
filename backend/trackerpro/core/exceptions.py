"""
Custom Exceptions for TrackerPro
================================

Business-rule violations raised by the account service. The API layer turns
them into the standard response envelope through an exception handler, so
endpoints never catch them themselves.

Usage:
    from trackerpro.core.exceptions import UserNotFoundError

    if not user:
        raise UserNotFoundError(user_id)

Infrastructure failures (SQLAlchemyError, hashing errors) are NOT wrapped
here; they propagate and are reported as 5xx by the global handlers.
"""

from typing import Optional, Any, Dict


class TrackerProError(Exception):
    """Base exception for all TrackerPro errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class BusinessRuleError(TrackerProError):
    """A request violated an account rule; state is unchanged"""

    status_code = 400

    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATION",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


# ============================================
# Registration / update validation (400)
# ============================================

class PasswordMismatchError(BusinessRuleError):
    """Password and confirmation differ"""

    def __init__(self):
        super().__init__("Passwords do not match", code="PASSWORD_MISMATCH")


class RequiredFieldError(BusinessRuleError):
    """A required field is missing or blank"""

    def __init__(self, field: str, message: str):
        super().__init__(message, code="REQUIRED_FIELD", details={"field": field})


class DuplicateEmailError(BusinessRuleError):
    """Email already belongs to another account"""

    def __init__(self, email: str):
        super().__init__(
            "Email already exists",
            code="DUPLICATE_EMAIL",
            details={"email": email}
        )


class DuplicateMobileError(BusinessRuleError):
    """Mobile number already belongs to another account"""

    def __init__(self, mobile: str):
        super().__init__(
            "Mobile number already exists",
            code="DUPLICATE_MOBILE",
            details={"mobile": mobile}
        )


class InvalidRoleError(BusinessRuleError):
    """Role string does not name a role that may be assigned"""

    def __init__(self, role: Optional[str], message: Optional[str] = None):
        super().__init__(
            message or f"Invalid role: {role}",
            code="INVALID_ROLE",
            details={"role": role}
        )


# ============================================
# State machine / protected records
# ============================================

class InvalidStatusTransitionError(BusinessRuleError):
    """Requested transition is not allowed from the current status"""

    def __init__(self, message: str, current_status: Optional[str] = None):
        details = {"current_status": current_status} if current_status else {}
        super().__init__(message, code="INVALID_STATUS_TRANSITION", details=details)


class ProtectedAccountError(BusinessRuleError):
    """Operation is not permitted on admin accounts"""

    def __init__(self, message: str):
        super().__init__(message, code="PROTECTED_ACCOUNT")


class StaleUserStateError(BusinessRuleError):
    """Another request changed the user between read and write"""

    status_code = 409

    def __init__(self, user_id: int):
        super().__init__(
            "User was modified by another request. Please reload and try again.",
            code="STALE_USER_STATE",
            details={"user_id": user_id}
        )


class UserNotFoundError(BusinessRuleError):
    """User not found"""

    status_code = 404

    def __init__(self, user_id: Any):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"resource_type": "User", "resource_id": str(user_id)}
        )


# ============================================
# Authentication & Authorization Errors
# ============================================

class InvalidCredentialsError(BusinessRuleError):
    """Unknown email or wrong password"""

    status_code = 401

    def __init__(self):
        super().__init__("Invalid email or password", code="AUTH_FAILED")


class AccountNotActiveError(BusinessRuleError):
    """Credentials are valid but the account may not sign in"""

    status_code = 403

    def __init__(self, message: str, status: Optional[str] = None):
        details = {"status": status} if status else {}
        super().__init__(message, code="ACCOUNT_NOT_ACTIVE", details=details)


class AdminAccessRequiredError(BusinessRuleError):
    """Authenticated user is not an administrator"""

    status_code = 403

    def __init__(self, message: str = "Access denied. Admin privileges required."):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: TrackerProError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "message": error.message,
        "error": error.to_dict()
    }
