"""User profile models built from directory records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = ["HeaderProfile", "ProfileEmail", "ProfileName", "UserProfile"]


class ProfileModel(BaseModel):
    """Base class for profile models, serialized with camel-case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileName(ProfileModel):
    """Components of the name of a user."""

    family_name: Any = Field(None, title="Family name")

    given_name: Any = Field(None, title="Given name")


class ProfileEmail(ProfileModel):
    """An email address of a user."""

    value: Any = Field(..., title="Email address")


class UserProfile(ProfileModel):
    """Normalized user profile mapped from a directory record.

    Attribute values are copied from the record as is, so a multi-valued
    attribute stays a list and non-string values keep their type.
    """

    id: Any = Field(
        None,
        title="Unique identifier",
        description="Taken from ``objectGUID``, or ``uid`` if not present",
    )

    display_name: Any = Field(None, title="Display name")

    name: ProfileName = Field(default_factory=ProfileName, title="Name")

    emails: list[ProfileEmail] | None = Field(
        None, title="Email addresses"
    )

    raw: dict[str, Any] = Field(
        default_factory=dict,
        title="Directory record",
        description=(
            "The directory record the profile was built from. The ``dn``"
            " attribute is used for bind authentication."
        ),
        alias="_json",
    )


class HeaderProfile(ProfileModel):
    """Minimal profile used when no directory is configured.

    Both fields are set to the username taken from the request.
    """

    id: str

    name: str
