# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating mailhawk configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/mailhawk/  (default: ~/.config/mailhawk/)
#
# Files:
#   - config.toml: Sending accounts and the default account name
#
# Passwords never go into config.toml; they live in the system keyring
# (see Account.keyring_service).
#
# Example config.toml:
#
#   [general]
#   default_account = "work"
#
#   [accounts.work]
#   email = "me@example.com"
#   display_name = "Me"
#   smtp_host = "smtp.example.com"
#   smtp_port = 465          # optional: 465 with a keyring password, 25 without
#   verify_tls = true
#   timeout = 30
# =============================================================================

import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from mailhawk.core import Account


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "mailhawk"


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for mailhawk.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/mailhawk/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class Config:
    """
    Main configuration container for mailhawk.

    Attributes:
        default_account: Name of the account used when none is given.
        accounts: Configured sending accounts, keyed by name.

    Usage:
        >>> config = Config.load()
        >>> config.get_account().smtp_host
        'smtp.example.com'
    """
    default_account: str = ""
    accounts: dict[str, Account] = field(default_factory=dict)

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load configuration from a TOML file.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded Config object, or the defaults if the file doesn't exist.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> None:
        """
        Save configuration to a TOML file.

        Creates the parent directory if it doesn't exist.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    def get_account(self, name: str | None = None) -> Account:
        """
        Look up an account by name (the default account if name is None).

        Raises:
            ConfigError: If there is no such account.
        """
        name = name or self.default_account
        if not name and len(self.accounts) == 1:
            # A single account doesn't need to be named
            name = next(iter(self.accounts))

        try:
            return self.accounts[name]
        except KeyError:
            raise ConfigError(f"No account named {name!r} in configuration") from None

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config object from a dictionary (parsed TOML).
        """
        config = cls()

        general = data.get("general", {})
        config.default_account = general.get("default_account", "")

        # Accounts - each key under [accounts] is an account name
        accounts_data = data.get("accounts", {})
        for name, acct_data in accounts_data.items():
            if "email" not in acct_data:
                raise ConfigError(f"Account {name!r} has no email address")
            config.accounts[name] = Account(
                name=name,
                email=acct_data["email"],
                display_name=acct_data.get("display_name", ""),
                smtp_host=acct_data.get("smtp_host", ""),
                smtp_port=acct_data.get("smtp_port"),
                verify_tls=acct_data.get("verify_tls", True),
                timeout=acct_data.get("timeout", 30),
            )

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert Config to a dictionary for TOML serialization.
        """
        data: dict[str, Any] = {}

        data["general"] = {
            "default_account": self.default_account,
        }

        data["accounts"] = {}
        for name, account in self.accounts.items():
            acct_data = {
                "email": account.email,
                "display_name": account.display_name,
                "smtp_host": account.smtp_host,
                "verify_tls": account.verify_tls,
                "timeout": account.timeout,
            }
            # TOML has no null; an unset port is simply left out
            if account.smtp_port is not None:
                acct_data["smtp_port"] = account.smtp_port
            data["accounts"][name] = acct_data

        return data


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print the config paths for debugging.
    Useful for users wondering where their config is stored.
    """
    print(f"Config:       {get_xdg_config_home()}")
    print(f"Config file:  {Config.config_file_path()}")
