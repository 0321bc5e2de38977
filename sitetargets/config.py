"""
Configuration for the site targets toolkit.

Options come from command line values first and SITETARGETS_* environment
variables second (a .env file in the working directory is loaded too).
"""

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from sitetargets.models import SharedSettings

ENV_PREFIX = "SITETARGETS_"


class MissingOptionError(ValueError):
    """A required option was not supplied."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing required option: {name}")


def try_get_required_option(name: str, value: Any) -> Any:
    """
    Return an option value, failing when it is missing or blank.

    Raises:
        MissingOptionError: If the value is None or an empty string
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingOptionError(name)
    return value


class Options(BaseModel):
    site_id: Optional[str] = None
    exclude_bindings: Optional[str] = None
    common_name: Optional[str] = None
    hide_https: bool = False
    inventory: Optional[str] = None

    ssl_port: int = 443
    validation_port: int = 80
    validation_site_id: Optional[int] = None
    installation_site_id: Optional[int] = None
    ftp_site_id: Optional[int] = None
    validation_plugin_name: Optional[str] = None

    @field_validator("ssl_port", "validation_port")
    @classmethod
    def check_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"Port out of range: {value}")
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> "Options":
        """
        Build options from the environment, letting explicit values win.

        Overrides set to None are ignored so that unset CLI flags do not
        hide environment values.
        """
        load_dotenv()
        values = {}
        for name in cls.model_fields:
            env_value = os.environ.get(ENV_PREFIX + name.upper())
            if env_value is not None and env_value != "":
                values[name] = env_value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def shared_settings(self) -> SharedSettings:
        """Request-scope settings to attach to a combined target."""
        return SharedSettings(
            ssl_port=self.ssl_port,
            validation_port=self.validation_port,
            validation_site_id=self.validation_site_id,
            installation_site_id=self.installation_site_id,
            ftp_site_id=self.ftp_site_id,
            exclude_bindings=self.exclude_bindings,
            validation_plugin_name=self.validation_plugin_name,
        )
