from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class InvalidScheduleError(AppException):
    def __init__(self, schedule: Any):
        super().__init__(
            message=f"Invalid payment schedule: {schedule}",
            status_code=422,
            error_code="INVALID_SCHEDULE",
            details={"schedule": schedule}
        )

class NotFoundError(AppException):
    def __init__(self, resource_type: str, resource_id: Any = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message += f" (ID: {resource_id})"
        super().__init__(
            message=message,
            status_code=404,
            error_code="RESOURCE_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )

class PaymentFailedError(AppException):
    """Raised by a chain gateway when a payment is rejected or cannot be submitted."""
    def __init__(self, message: str = "Blockchain transaction failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="PAYMENT_FAILED",
            details=details
        )

class ChainGatewayError(AppException):
    def __init__(self, message: str = "Chain gateway unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=503,
            error_code="CHAIN_GATEWAY_UNAVAILABLE",
            details=details
        )

class InvalidStatusTransitionError(AppException):
    def __init__(self, current: str, requested: str, payment_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message=message or f"Cannot move payment from '{current}' to '{requested}'",
            status_code=409,
            error_code="INVALID_STATUS_TRANSITION",
            details={"payment_id": payment_id, "current": current, "requested": requested}
        )

class NotCancellableError(InvalidStatusTransitionError):
    def __init__(self, payment_id: str, current: str):
        super().__init__(
            current=current,
            requested="cancelled",
            payment_id=payment_id,
            message=f"Payment {payment_id} is '{current}' and cannot be cancelled; only scheduled payments can"
        )
        self.error_code = "NOT_CANCELLABLE"

class CompanyInactiveError(AppException):
    def __init__(self, company_id: str):
        super().__init__(
            message=f"Company {company_id} is inactive; payments are suspended",
            status_code=409,
            error_code="COMPANY_INACTIVE",
            details={"company_id": company_id}
        )
