import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class GatewaySettings(BaseModel):
    mode: str = Field(default=os.getenv("GATEWAY_MODE", "mock"))
    rpc_url: Optional[str] = Field(default=os.getenv("RPC_URL"))
    rpc_timeout: float = float(os.getenv("RPC_TIMEOUT_SECONDS", "15"))
    # Sending account for the RPC gateway; falls back to eth_accounts[0]
    from_address: Optional[str] = Field(default=os.getenv("PAYROLL_FROM_ADDRESS"))
    # Mock chain behaviour
    mock_failure_rate: float = float(os.getenv("MOCK_FAILURE_RATE", "0.05"))
    mock_min_delay: float = float(os.getenv("MOCK_MIN_DELAY", "0.5"))
    mock_max_delay: float = float(os.getenv("MOCK_MAX_DELAY", "2.0"))
    mock_account: str = os.getenv("MOCK_ACCOUNT", "0x" + "0" * 39 + "1")
    mock_network: str = os.getenv("MOCK_NETWORK", "Ethereum Mainnet")

class SchedulerSettings(BaseModel):
    enabled: bool = Field(default=os.getenv("SCHEDULER_ENABLED", "false").lower() == "true")
    interval_seconds: float = float(os.getenv("SCHEDULER_INTERVAL_SECONDS", str(60 * 60)))  # hourly
    payment_timeout_seconds: float = float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "30"))

class Config(BaseModel):
    app_name: str = "PayStream Payroll"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./paystream.db")

    # Stablecoin used for payroll display
    token_symbol: str = os.getenv("TOKEN_SYMBOL", "MNEE")

    gateway: GatewaySettings = GatewaySettings()
    scheduler: SchedulerSettings = SchedulerSettings()

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.gateway.mode == "mock":
    _logger.warning("Mock chain gateway is active in production; payments will not reach a chain.")
if settings.gateway.mode == "rpc" and not settings.gateway.rpc_url:
    raise RuntimeError("FATAL: GATEWAY_MODE=rpc requires RPC_URL to be set.")
