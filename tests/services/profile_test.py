"""Tests for mapping directory records to profiles."""

from __future__ import annotations

from adstrategy.models.directory import DirectoryRecord
from adstrategy.models.profile import ProfileName, UserProfile
from adstrategy.services.profile import ProfileMapper

from ..support.constants import TEST_GUID


def test_default_mapping(jdoe_record: DirectoryRecord) -> None:
    profile = ProfileMapper().map_profile(jdoe_record)

    assert profile
    assert profile.model_dump(by_alias=True) == {
        "id": TEST_GUID,
        "displayName": "Jane Doe",
        "name": {"familyName": "Doe", "givenName": "Jane"},
        "emails": [{"value": "jdoe@example.com"}],
        "_json": jdoe_record,
    }


def test_alternate_attributes() -> None:
    record = {"uid": "bob", "surName": "Smith", "gn": "Bob"}
    profile = ProfileMapper().map_profile(record)

    assert profile == UserProfile(
        id="bob",
        name=ProfileName(family_name="Smith", given_name="Bob"),
        raw=record,
    )
    assert profile.emails is None
    assert profile.display_name is None


def test_preferred_attributes() -> None:
    record = {
        "objectGUID": TEST_GUID,
        "uid": "bob",
        "sn": "Smith",
        "surName": "Jones",
        "gn": "Robert",
        "givenName": "Bob",
    }
    profile = ProfileMapper().map_profile(record)

    assert profile
    assert profile.id == TEST_GUID
    assert profile.name.family_name == "Smith"
    assert profile.name.given_name == "Robert"


def test_empty_record() -> None:
    mapper = ProfileMapper()
    assert mapper.map_profile(None) is None
    assert mapper.map_profile({}) == UserProfile(raw={})


def test_non_string_values() -> None:
    record = {
        "uid": ["bob", "rsmith"],
        "displayName": 42,
        "sn": ["Smith"],
        "mail": ["bob@example.com", "rsmith@example.com"],
    }
    profile = ProfileMapper().map_profile(record)

    assert profile
    assert profile.id == ["bob", "rsmith"]
    assert profile.display_name == 42
    assert profile.name.family_name == ["Smith"]
    assert profile.emails
    assert profile.emails[0].value == record["mail"]
    assert profile.raw == record


def test_remap_raw(jdoe_record: DirectoryRecord) -> None:
    mapper = ProfileMapper()
    profile = mapper.map_profile(jdoe_record)
    assert profile
    assert mapper.map_profile(profile.raw) == profile


def test_custom_mapper(jdoe_record: DirectoryRecord) -> None:
    def map_profile(record: DirectoryRecord) -> UserProfile:
        return UserProfile(
            id=record["userPrincipalName"],
            display_name=record["sAMAccountName"],
            raw={"overridden": True},
        )

    mapper = ProfileMapper(map_profile)
    profile = mapper.map_profile(jdoe_record)

    assert profile
    assert profile.id == "jdoe@corp.example.com"
    assert profile.display_name == "jdoe"
    assert profile.raw == jdoe_record
    assert mapper.map_profile(profile.raw) == profile
    assert mapper.map_profile({}) is None
