from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional
import os
import logging
import sys

logger = logging.getLogger(__name__)


def get_env_file() -> Optional[str]:
    """
    Determine which .env file to use based on APP_ENV environment variable.

    Available environments:
    - local: Development/testing environment (.env.local)
    - prod: Production environment (.env.prod)

    When APP_ENV is not set, only the process environment is read
    (this is how the Lambda runtime supplies TABLE_NAME).

    :return: Path to the .env file to load, or None
    :raises SystemExit: If APP_ENV is invalid or its file is missing
    """
    app_env = os.getenv("APP_ENV", "").lower().strip()

    if not app_env:
        return None

    # List of valid environments
    valid_envs = ["local", "prod"]

    if app_env not in valid_envs:
        error_msg = (
            "\n" + "="*70 + "\n"
            f"ERROR: Invalid APP_ENV value: '{app_env}'\n\n"
            f"Valid environments: {', '.join(valid_envs)}\n\n"
            "Please set APP_ENV to one of the valid values, or unset it\n"
            "to read configuration from the environment only:\n"
            "  - APP_ENV=local (for development/testing)\n"
            "  - APP_ENV=prod (for production)\n"
            "="*70
        )
        logger.error(error_msg)
        sys.exit(1)

    env_file = f".env.{app_env}"

    if not os.path.exists(env_file):
        error_msg = (
            "\n" + "="*70 + "\n"
            f"ERROR: Configuration file not found: {env_file}\n\n"
            f"APP_ENV is set to '{app_env}' but {env_file} does not exist.\n\n"
            "Please create the configuration file:\n"
            f"  1. Copy .env.example to {env_file}\n"
            f"  2. Fill in the table name and store settings\n"
            "="*70
        )
        logger.error(error_msg)
        sys.exit(1)

    logger.info(f"Loading configuration from {env_file} (APP_ENV={app_env})")
    return env_file


def mask_sensitive_value(value: Optional[str], show_chars: int = 4) -> str:
    """
    Mask sensitive values for logging, showing only the last few characters.

    :param value: The sensitive value to mask
    :param show_chars: Number of characters to show at the end
    :return: Masked string like "***xyz"
    """
    if not value:
        return "[NOT SET]"
    if len(value) <= show_chars:
        return "*" * len(value)
    return "*" * (len(value) - show_chars) + value[-show_chars:]


class Settings(BaseSettings):
    # API
    API_TITLE: str = "Feedback Submission Service"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Accepts feedback submissions and stores them in a key-value table"

    # Store
    TABLE_NAME: str = "feedback"
    STORE_BACKEND: Literal["dynamodb", "local"] = "dynamodb"
    AWS_REGION: Optional[str] = None
    DYNAMODB_ENDPOINT_URL: Optional[str] = None  # DynamoDB Local / LocalStack
    LOCAL_STORAGE_DIR: Optional[str] = None  # defaults to <service>/tmp

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=get_env_file(), extra='ignore')

    def log_config_summary(self):
        """Log configuration summary with sensitive values masked."""
        current_env = os.getenv("APP_ENV", "unset")

        logger.info("=" * 70)
        logger.info(f"Configuration Summary (Environment: {current_env})")
        logger.info("=" * 70)
        logger.info(f"Table Name: {self.TABLE_NAME}")
        logger.info(f"Store Backend: {self.STORE_BACKEND}")
        if self.STORE_BACKEND == "dynamodb":
            logger.info(f"AWS Region: {self.AWS_REGION or '[from environment]'}")
            logger.info(f"DynamoDB Endpoint: {self.DYNAMODB_ENDPOINT_URL or '[default]'}")
            logger.info(f"AWS Access Key: {mask_sensitive_value(os.getenv('AWS_ACCESS_KEY_ID'))}")
        else:
            logger.info(f"Local Storage Dir: {self.LOCAL_STORAGE_DIR or '[default]'}")
        logger.info(f"Log Level: {self.LOG_LEVEL}")
        logger.info("=" * 70)


# Initialize settings singleton
settings = Settings()
