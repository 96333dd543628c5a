"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import Optional


class BankSimConfig(BaseSettings):
    """Bank simulator configuration"""

    # Bank configuration
    bank_name: str = "Financial Bank"
    initial_capital: Decimal = Decimal("1000000")

    # Lending and reserve policy
    reserve_seed_ratio: Decimal = Decimal("0.10")       # Reserve fund at start, share of capital
    exposure_limit_ratio: Decimal = Decimal("0.10")     # Max single loan, share of current capital
    own_funds_ratio: Decimal = Decimal("0.20")          # Client balance required, share of loan
    reserve_profit_share: Decimal = Decimal("0.20")     # Share of loan profit moved to reserve
    reserve_yield_rate: Decimal = Decimal("0.01")       # Monthly investment yield on reserve
    delinquency_penalty_rate: Decimal = Decimal("5")    # Percentage points per missed payment
    reprice_on_delinquency: bool = False                # Recompute payment after a penalty

    # Account products (annual rate, percent)
    checking_rate: Decimal = Decimal("0.5")
    savings_rate: Decimal = Decimal("3.5")
    deposit_rate: Decimal = Decimal("5.0")

    # Identifier generation
    first_client_id: int = 1
    first_loan_id: int = 1
    first_account_number: int = 1000001
    account_number_prefix: str = "ACC"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    seed_demo_data: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    class Config:
        env_prefix = "BANKSIM_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankSimConfig()


def get_config() -> BankSimConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankSimConfig:
    """Reload configuration from environment"""
    global config
    config = BankSimConfig()
    return config
