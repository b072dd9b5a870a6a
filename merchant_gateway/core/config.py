from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_ENVIRONMENTS = {"sandbox", "production", "development", "qa"}


class BraintreeSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BRAINTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    merchant_id: Optional[str] = Field(default=None, description="Braintree merchant ID")
    public_key: Optional[str] = Field(default=None, description="Braintree public API key")
    private_key: Optional[str] = Field(default=None, description="Braintree private API key")
    merchant_account_id: Optional[str] = Field(
        default=None,
        description="Default merchant account used when a call does not name one",
    )
    environment: str = Field(default="sandbox", description="sandbox, production, development or qa")
    test: bool = Field(default=False, description="Mark responses as produced in test mode")

    @model_validator(mode="before")
    @classmethod
    def validate_environment(cls, data: dict) -> dict:
        """Normalise the environment name and reject ones the SDK does not know."""
        if not isinstance(data, dict):
            return data
        data = data.copy()

        environment = data.get("environment")
        if environment is None:
            return data

        environment = str(environment).strip().lower()
        if environment not in ALLOWED_ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(ALLOWED_ENVIRONMENTS)}, got '{environment}'"
            )
        data["environment"] = environment
        return data

    @property
    def has_credentials(self) -> bool:
        return all([self.merchant_id, self.public_key, self.private_key])


@lru_cache(maxsize=None)
def get_settings() -> BraintreeSettings:
    """
    Get cached settings instance.

    Returns:
        BraintreeSettings: The cached settings instance
    """
    return BraintreeSettings()


def clear_settings_cache() -> None:
    """
    Clear the cached settings instance.

    Useful for testing or when credentials need to be reloaded.
    """
    get_settings.cache_clear()
