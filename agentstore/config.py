"""
agentstore Configuration Module

Loads environment variables for store arbitration and the read-only HTTP surface.
"""
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Notes:
    - action_type is the capability name declared to the action-dispatch framework
    - account_arg_name is the argument key the payment request handler fills in
    - Demo mode exposes error types in HTTP error bodies
    """

    # Capability Configuration
    action_type: str = "paymentRequest"
    account_arg_name: str = "payment_account_id"

    # Demo Configuration
    demo_mode: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        env_prefix = "AGENTSTORE_"
        case_sensitive = False


# Global settings instance
settings = Settings()
