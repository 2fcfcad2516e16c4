"""Active Directory authentication strategy.

The directory client is also passed to the verify function (by default) so
that it can run its own queries against Active Directory.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Sequence
from typing import Any, cast

import structlog
from structlog.stdlib import BoundLogger

from .config import (
    ClientConfig,
    FilterFunction,
    HeaderFunction,
    PrebuiltClient,
    StrategyConfig,
)
from .constants import DEFAULT_ATTRIBUTES, LOGON_USER_HEADER, STRATEGY_NAME
from .exceptions import MissingVerifyError, StrategyConfigError
from .factory import create_ldap_client
from .models.directory import DirectoryClient, DirectoryRecord
from .models.outcome import AuthError, AuthFailure, AuthOutcome, AuthSuccess
from .models.profile import HeaderProfile, UserProfile
from .models.request import AuthenticationRequest
from .models.verify import (
    Profile,
    ProfileClientVerify,
    ProfileVerify,
    RequestProfileClientVerify,
    RequestProfileVerify,
    Verify,
    VerifyShape,
)
from .services.profile import ProfileMapper
from .storage.ldap import LDAPDirectoryClient

__all__ = [
    "ActiveDirectoryStrategy",
    "default_filter",
    "get_username_from_header",
]


def default_filter(username: str) -> str:
    """Build the default search filter for a user.

    The username is inserted as is, without escaping filter metacharacters,
    so a username containing them changes the meaning of the filter. Use a
    custom filter function if usernames come from an untrusted source.
    """
    return (
        f"(&(objectclass=user)(|(sAMAccountName={username})"
        f"(UserPrincipalName={username})))"
    )


def get_username_from_header(request: AuthenticationRequest) -> str | None:
    """Get the username from the iisnode logon user header.

    Parameters
    ----------
    request
        Incoming request.

    Returns
    -------
    str or None
        The part of the ``DOMAIN\\username`` header value after the first
        backslash, or `None` if the header is missing or has no backslash.
    """
    value = request.headers.get(LOGON_USER_HEADER)
    if not value:
        return None
    _, sep, username = value.partition("\\")
    if not sep:
        return None
    return username


class ActiveDirectoryStrategy:
    """Authenticate users against Active Directory.

    In integrated mode, the username is taken from a header set by a web
    server that already performed Windows authentication. Otherwise, the
    username and password are read from the request and checked by binding
    to the directory as the user.

    Parameters
    ----------
    verify
        Function called with the user profile and a completion callback once
        the user has been identified. See `~adstrategy.models.verify` for the
        calling conventions.
    config
        Options for the strategy. Defaults to integrated mode with no
        directory lookups.
    logger
        Logger to use. Defaults to the ``adstrategy`` logger.

    Raises
    ------
    MissingVerifyError
        Raised if no verify function was given.
    StrategyConfigError
        Raised if the directory client should be passed to the verify
        function but no directory is configured.
    """

    name = STRATEGY_NAME

    def __init__(
        self,
        verify: Verify | None,
        config: StrategyConfig | None = None,
        *,
        logger: BoundLogger | None = None,
    ) -> None:
        if verify is None:
            raise MissingVerifyError()
        self._verify = verify
        self._config = config or StrategyConfig()
        self._logger = logger or structlog.get_logger("adstrategy")
        self._mapper = ProfileMapper(self._config.map_profile)
        self._get_username: HeaderFunction = (
            self._config.get_username_from_header or get_username_from_header
        )

        self._client: DirectoryClient | None = None
        self._owns_client = False
        self._filter: FilterFunction = default_filter
        attributes = None
        match self._config.ldap:
            case PrebuiltClient(client=client) as ldap:
                self._client = client
                self._filter = ldap.filter or default_filter
                attributes = ldap.attributes
            case ClientConfig(ldap=ldap_config) as ldap:
                self._client = create_ldap_client(ldap_config, self._logger)
                self._owns_client = True
                self._filter = ldap.filter or default_filter
                attributes = ldap_config.attributes
        self._attributes = self._build_attributes(attributes)

        pass_client = self._config.pass_client_to_callback
        if pass_client is None:
            pass_client = self._client is not None
        elif pass_client and self._client is None:
            msg = "Cannot pass directory client to verify without a directory"
            raise StrategyConfigError(msg)
        self._shape = VerifyShape.select(
            pass_request=self._config.pass_request_to_callback,
            pass_client=pass_client,
        )

    @property
    def client(self) -> DirectoryClient | None:
        """Directory client used by the strategy, if any."""
        return self._client

    @property
    def verify_shape(self) -> VerifyShape:
        """Calling convention used for the verify function."""
        return self._shape

    async def aclose(self) -> None:
        """Close the directory client if the strategy created it."""
        if self._owns_client and isinstance(
            self._client, LDAPDirectoryClient
        ):
            await self._client.aclose()

    def map_profile(
        self, record: DirectoryRecord | None
    ) -> UserProfile | None:
        """Convert a directory record to a user profile.

        Parameters
        ----------
        record
            Record returned by the directory client.

        Returns
        -------
        UserProfile or None
            Profile built by the configured or default mapping, or `None` if
            there was no record.
        """
        return self._mapper.map_profile(record)

    async def authenticate(
        self, request: AuthenticationRequest
    ) -> AuthOutcome:
        """Authenticate a request.

        Parameters
        ----------
        request
            Incoming request.

        Returns
        -------
        AuthSuccess or AuthFailure or AuthError
            Outcome of the authentication. Errors from the directory client,
            the profile mapping or the verify function are returned as
            `AuthError` rather than raised.
        """
        password = None
        if self._config.integrated:
            username = self._get_username(request)
            if not username:
                self._logger.info("No username in request headers")
                return AuthFailure()
        else:
            username = self._get_field(request, self._config.username_field)
            password = self._get_field(request, self._config.password_field)
            if not username:
                self._logger.info("No username in request")
                return AuthFailure("Missing credentials")
        logger = self._logger.bind(user=username)

        if self._client is None:
            profile = HeaderProfile(id=username, name=username)
            return await self._run_verify(request, profile, logger)

        filter_exp = self._filter(username)
        attributes = list(self._attributes)
        logger.debug("Searching for user", ldap_search=filter_exp)
        try:
            result = await self._client.find(filter_exp, attributes)
        except Exception as e:
            logger.exception("Directory search failed", error=str(e))
            return AuthError(e)
        users = result.users if result else None
        if not isinstance(users, list) or not users:
            logger.info("User not found in directory")
            return AuthFailure(f'The user "{username}" was not found')
        try:
            user_profile = self.map_profile(users[0])
        except Exception as e:
            logger.exception("Cannot map directory record", error=str(e))
            return AuthError(e)
        if user_profile is None:
            logger.info("User not found in directory")
            return AuthFailure(f'The user "{username}" was not found')

        if not self._config.integrated:
            dn = user_profile.raw.get("dn", "")
            try:
                authenticated = await self._client.authenticate(dn, password)
            except Exception as e:
                logger.exception("Directory bind failed", error=str(e))
                return AuthError(e)
            if not authenticated:
                logger.info("Password authentication failed")
                return AuthFailure(f"Authentication failed for {username}")

        return await self._run_verify(request, user_profile, logger)

    def _build_attributes(
        self, attributes: str | Sequence[str] | None
    ) -> tuple[str, ...]:
        """Normalize the configured attributes into a tuple including dn."""
        if not attributes:
            attributes = DEFAULT_ATTRIBUTES
        elif isinstance(attributes, str):
            attributes = [attributes]
        result = tuple(attributes)
        if "dn" not in result:
            result += ("dn",)
        return result

    def _get_field(
        self, request: AuthenticationRequest, field: str
    ) -> str | None:
        """Get a value from the request body, falling back on the query.

        JSON bodies may carry non-string values, which are converted to
        strings before they reach the directory.
        """
        value = request.body.get(field) or request.query.get(field)
        if not value:
            return None
        return value if isinstance(value, str) else str(value)

    async def _run_verify(
        self,
        request: AuthenticationRequest,
        profile: Profile,
        logger: BoundLogger,
    ) -> AuthOutcome:
        """Call the verify function and wait for it to report a result."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[AuthOutcome] = loop.create_future()

        def done(
            error: BaseException | None, user: Any, info: Any = None
        ) -> None:
            if future.done():
                logger.warning("Verify completion called more than once")
                return
            if error:
                future.set_result(AuthError(error))
            elif not user:
                future.set_result(AuthFailure(info))
            else:
                future.set_result(AuthSuccess(user, info))

        try:
            result = self._call_verify(request, profile, done)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.exception("Verify function failed", error=str(e))
            if not future.done():
                future.set_result(AuthError(e))

        outcome = await future
        match outcome:
            case AuthSuccess():
                logger.info("Authenticated user")
            case AuthFailure(info=info):
                logger.info("User rejected by verify function", info=info)
            case AuthError(error=error):
                msg = "Verify function reported error"
                logger.error(msg, error=str(error))
        return outcome

    def _call_verify(
        self, request: AuthenticationRequest, profile: Profile, done: Any
    ) -> Any:
        """Call the verify function with the configured signature."""
        match self._shape:
            case VerifyShape.profile:
                verify = cast(ProfileVerify, self._verify)
                return verify(profile, done)
            case VerifyShape.profile_client:
                client_verify = cast(ProfileClientVerify, self._verify)
                return client_verify(profile, self._client, done)
            case VerifyShape.request_profile:
                request_verify = cast(RequestProfileVerify, self._verify)
                return request_verify(request, profile, done)
            case VerifyShape.request_profile_client:
                full_verify = cast(RequestProfileClientVerify, self._verify)
                return full_verify(request, profile, self._client, done)
