from fastapi import APIRouter
from paystream.routers import analytics, companies, employees, payments, scheduler

# Routers are aggregated here; main.py only imports this hub.
api_router = APIRouter()

api_router.include_router(companies.router)
api_router.include_router(employees.router)
api_router.include_router(payments.router)
api_router.include_router(scheduler.router)
api_router.include_router(analytics.router)
