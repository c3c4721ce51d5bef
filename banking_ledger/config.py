"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class LedgerConfig(BaseSettings):
    """Banking ledger configuration"""
    
    # Credential hashing (PBKDF2) configuration
    kdf_iterations: int = 10000  # Work factor, tune for interactive latency
    kdf_hash_name: str = "sha1"  # PRF of the stored 36-byte hash format
    salt_length: int = 16
    derived_key_length: int = 20
    
    # Ledger configuration
    currency: str = "USD"
    history_timestamp_format: str = "%A, %d %B %Y %H:%M:%S"
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    
    class Config:
        env_prefix = "LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
