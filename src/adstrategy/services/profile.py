"""Mapping of directory records to user profiles."""

from __future__ import annotations

from ..config import MapProfileFunction
from ..models.directory import DirectoryRecord
from ..models.profile import ProfileEmail, ProfileName, UserProfile

__all__ = ["ProfileMapper"]


class ProfileMapper:
    """Build user profiles from directory records.

    Parameters
    ----------
    custom_mapper
        If given, used instead of the default mapping. The raw record is
        still attached to whatever it returns.
    """

    def __init__(
        self, custom_mapper: MapProfileFunction | None = None
    ) -> None:
        self._custom_mapper = custom_mapper

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
            Profile for the user, or `None` if there was no record. The
            ``raw`` field (serialized as ``_json``) is always the record
            itself, so mapping ``profile.raw`` again gives the same profile.
        """
        if record is None:
            return None
        if self._custom_mapper:
            profile = self._custom_mapper(record)
            return profile.model_copy(update={"raw": record})
        return self._default_profile(record)

    def _default_profile(self, record: DirectoryRecord) -> UserProfile:
        mail = record.get("mail")
        return UserProfile(
            id=record.get("objectGUID") or record.get("uid"),
            display_name=record.get("displayName"),
            name=ProfileName(
                family_name=record.get("sn") or record.get("surName"),
                given_name=record.get("gn") or record.get("givenName"),
            ),
            emails=[ProfileEmail(value=mail)] if mail else None,
            raw=record,
        )
