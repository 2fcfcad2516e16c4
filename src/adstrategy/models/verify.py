"""Calling conventions for the verify function.

The verify function supplied by the application receives the user profile
and a completion callback, optionally preceded by the request and followed by
the directory client. Each combination is a separate protocol so that the
strategy always calls the function with a fixed signature selected by
`VerifyShape`.
"""

from __future__ import annotations

from collections.abc import Awaitable
from enum import Enum
from typing import Any, Protocol, Self, TypeAlias

from .directory import DirectoryClient
from .profile import HeaderProfile, UserProfile
from .request import AuthenticationRequest

__all__ = [
    "Done",
    "Profile",
    "ProfileClientVerify",
    "ProfileVerify",
    "RequestProfileClientVerify",
    "RequestProfileVerify",
    "Verify",
    "VerifyShape",
]

Profile: TypeAlias = UserProfile | HeaderProfile
"""Either kind of profile passed to the verify function."""


class Done(Protocol):
    """Completion callback given to the verify function.

    Parameters
    ----------
    error
        Error that prevented verification, if any.
    user
        Verified user, or a false value to reject the authentication.
    info
        Additional information passed along with the result.
    """

    def __call__(
        self, error: BaseException | None, user: Any, info: Any = None
    ) -> None: ...


class ProfileVerify(Protocol):
    def __call__(
        self, profile: Profile, done: Done
    ) -> Awaitable[None] | None: ...


class ProfileClientVerify(Protocol):
    def __call__(
        self, profile: Profile, client: DirectoryClient, done: Done
    ) -> Awaitable[None] | None: ...


class RequestProfileVerify(Protocol):
    def __call__(
        self, request: AuthenticationRequest, profile: Profile, done: Done
    ) -> Awaitable[None] | None: ...


class RequestProfileClientVerify(Protocol):
    def __call__(
        self,
        request: AuthenticationRequest,
        profile: Profile,
        client: DirectoryClient,
        done: Done,
    ) -> Awaitable[None] | None: ...


Verify: TypeAlias = (
    ProfileVerify
    | ProfileClientVerify
    | RequestProfileVerify
    | RequestProfileClientVerify
)
"""Any of the supported verify function signatures."""


class VerifyShape(Enum):
    """Which arguments are passed to the verify function."""

    profile = "profile"
    """``verify(profile, done)``"""

    profile_client = "profile_client"
    """``verify(profile, client, done)``"""

    request_profile = "request_profile"
    """``verify(request, profile, done)``"""

    request_profile_client = "request_profile_client"
    """``verify(request, profile, client, done)``"""

    @classmethod
    def select(cls, *, pass_request: bool, pass_client: bool) -> Self:
        """Choose the shape from the two configuration flags.

        Parameters
        ----------
        pass_request
            Whether the request is passed as the first argument.
        pass_client
            Whether the directory client is passed after the profile.

        Returns
        -------
        VerifyShape
            Corresponding calling convention.
        """
        if pass_request:
            if pass_client:
                return cls.request_profile_client
            return cls.request_profile
        if pass_client:
            return cls.profile_client
        return cls.profile

    @property
    def passes_client(self) -> bool:
        """Whether this shape passes the directory client."""
        return self in (
            VerifyShape.profile_client,
            VerifyShape.request_profile_client,
        )
