"""
Request-scoped access to the process-wide collaborators.

The scheduler and gateway are built once in the application lifespan and
stored on app.state; routers receive them through these dependencies so
tests can override them.
"""
from fastapi import HTTPException, Request, status

from paystream.gateway.base import ChainGateway
from paystream.services.payment_scheduler import PaymentScheduler


def get_scheduler(request: Request) -> PaymentScheduler:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payment scheduler is not initialised",
        )
    return scheduler


def get_gateway(request: Request) -> ChainGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chain gateway is not initialised",
        )
    return gateway


__all__ = [
    "get_scheduler",
    "get_gateway",
]
