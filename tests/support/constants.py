"""Constants for tests."""

TEST_GUID = "5a5b1f0e-9c6a-4d2e-8f27-3b1c2d4e5f60"
"""``objectGUID`` of the test user."""

TEST_HOSTNAME = "example.com"
"""The hostname used in test requests."""
