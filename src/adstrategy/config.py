"""Configuration for adstrategy.

There are two layers of configuration. `Config` holds the settings that can
be expressed in the YAML configuration file or environment variables and is
used by the FastAPI application. `StrategyConfig` is the full set of options
for `~adstrategy.strategy.ActiveDirectoryStrategy`, including the ones that
can only be set from code, such as custom filter and profile mapping
functions. `Config.strategy_config` converts one to the other.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Self, TypeAlias

import yaml
from pydantic import AliasChoices, Field, SecretStr, UrlConstraints
from pydantic.alias_generators import to_camel
from pydantic_core import Url
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, Profile, configure_logging
from typing_extensions import override

from .constants import DEFAULT_PASSWORD_FIELD, DEFAULT_USERNAME_FIELD
from .models.directory import DirectoryClient, DirectoryRecord
from .models.profile import UserProfile

if TYPE_CHECKING:
    from .models.request import AuthenticationRequest

LdapDsn = Annotated[
    Url, UrlConstraints(allowed_schemes=["ldap", "ldaps"], host_required=True)
]
"""DSN for connecting to an LDAP server."""

FilterFunction: TypeAlias = Callable[[str], str]
"""Builds an LDAP search filter from a username."""

HeaderFunction: TypeAlias = Callable[["AuthenticationRequest"], str | None]
"""Extracts the username from a request in integrated mode."""

MapProfileFunction: TypeAlias = Callable[[DirectoryRecord], UserProfile]
"""Maps a directory record to a user profile."""

__all__ = [
    "CamelCaseSettings",
    "ClientConfig",
    "Config",
    "EnvFirstSettings",
    "FilterFunction",
    "HeaderFunction",
    "LDAPConfig",
    "LdapDsn",
    "MapProfileFunction",
    "PrebuiltClient",
    "StrategyConfig",
]


class CamelCaseSettings(BaseSettings):
    """Base class for Pydantic settings supporting camel-case.

    This base class also forbids all extra attributes.
    """

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )


class EnvFirstSettings(CamelCaseSettings):
    """Base class for Pydantic settings with environment overrides.

    Classes that inherit from this base class will prioritize environment
    variables over arguments to the class constructor.
    """

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Override the sources of settings.

        Deactivate :file:`.env` and secret file support. Allow environment
        variables to override init parameters, since init parameters come
        from the YAML configuration file and we want environment variables to
        take precedent.
        """
        return (env_settings, init_settings)


class LDAPConfig(EnvFirstSettings):
    """Settings for connecting to Active Directory over LDAP."""

    url: LdapDsn = Field(
        ...,
        title="LDAP server URL",
        description="URL of the Active Directory server to query",
        validation_alias=AliasChoices("ADSTRATEGY_LDAP_URL", "url"),
    )

    base_dn: str = Field(
        ...,
        title="Base DN for user searches",
        description="Base DN of the subtree searched for user records",
    )

    user_dn: str | None = Field(
        None,
        title="Simple bind DN for LDAP searches",
        description=(
            "DN of user to bind as with simple bind when searching the"
            " directory. If not set, searches use an anonymous bind."
        ),
    )

    password: SecretStr | None = Field(
        None,
        title="Simple bind password",
        description=(
            "Password for simple bind authentication to the LDAP server."
            " Only used if ``user_dn`` is set."
        ),
        validation_alias=AliasChoices("ADSTRATEGY_LDAP_PASSWORD", "password"),
    )

    attributes: list[str] | str | None = Field(
        None,
        title="Attributes to retrieve",
        description=(
            "Attributes retrieved for the user. If not set, a default set of"
            " Active Directory attributes is used. ``dn`` is always added."
        ),
    )


@dataclass(frozen=True)
class PrebuiltClient:
    """Use an existing directory client."""

    client: DirectoryClient
    """Client used for searches and binds."""

    filter: FilterFunction | None = None
    """Custom search filter builder."""

    attributes: str | Sequence[str] | None = None
    """Custom attributes to retrieve."""


@dataclass(frozen=True)
class ClientConfig:
    """Create an LDAP directory client from connection settings."""

    ldap: LDAPConfig
    """Connection settings, which also carry the attribute override."""

    filter: FilterFunction | None = None
    """Custom search filter builder."""


@dataclass(frozen=True)
class StrategyConfig:
    """Options for `~adstrategy.strategy.ActiveDirectoryStrategy`."""

    integrated: bool = True
    """Trust the identity header set by the web server.

    If false, the username and password are taken from the request and
    checked with an LDAP bind.
    """

    username_field: str = DEFAULT_USERNAME_FIELD
    """Body or query parameter holding the username if not integrated."""

    password_field: str = DEFAULT_PASSWORD_FIELD
    """Body or query parameter holding the password if not integrated."""

    pass_request_to_callback: bool = False
    """Pass the request as the first argument of the verify function."""

    pass_client_to_callback: bool | None = None
    """Pass the directory client to the verify function.

    If `None`, the client is passed whenever a directory is configured.
    """

    get_username_from_header: HeaderFunction | None = None
    """Custom username extraction for integrated mode."""

    map_profile: MapProfileFunction | None = None
    """Custom mapping of directory records to profiles."""

    ldap: PrebuiltClient | ClientConfig | None = None
    """Directory to use, or `None` to skip directory lookups."""


class Config(EnvFirstSettings):
    """Configuration for the adstrategy application."""

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Logging level",
        description="Python logging level",
        validation_alias=AliasChoices("ADSTRATEGY_LOG_LEVEL", "logLevel"),
    )

    log_profile: Profile = Field(
        Profile.production,
        title="Logging profile",
        description="Use ``development`` for human-readable output",
        validation_alias=AliasChoices("ADSTRATEGY_LOG_PROFILE", "logProfile"),
    )

    integrated: bool = Field(
        True,
        title="Use integrated authentication",
        description=(
            "Trust the Windows identity header set by the web server. If"
            " false, check a username and password against LDAP."
        ),
    )

    username_field: str = Field(
        DEFAULT_USERNAME_FIELD,
        title="Username parameter",
        description="Body or query parameter containing the username",
    )

    password_field: str = Field(
        DEFAULT_PASSWORD_FIELD,
        title="Password parameter",
        description="Body or query parameter containing the password",
    )

    pass_request_to_callback: bool = Field(
        False,
        title="Pass request to verify",
        description="Whether the verify function receives the request",
    )

    ldap: LDAPConfig | None = Field(
        None,
        title="LDAP configuration",
        description="If not set, the username is used without a lookup",
    )

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        with path.open("r") as f:
            return cls(**(yaml.safe_load(f) or {}))

    def configure_logging(self) -> None:
        """Configure logging based on the configuration."""
        configure_logging(
            name="adstrategy",
            profile=self.log_profile,
            log_level=self.log_level,
        )

    def strategy_config(self, **kwargs: Any) -> StrategyConfig:
        """Build the strategy options from this configuration.

        Parameters
        ----------
        **kwargs
            Additional `StrategyConfig` options, such as custom functions,
            which override the values from the configuration file.

        Returns
        -------
        StrategyConfig
            Options for the strategy.
        """
        options: dict[str, Any] = {
            "integrated": self.integrated,
            "username_field": self.username_field,
            "password_field": self.password_field,
            "pass_request_to_callback": self.pass_request_to_callback,
        }
        if self.ldap:
            options["ldap"] = ClientConfig(ldap=self.ldap)
        options.update(kwargs)
        return StrategyConfig(**options)
