"""Test configuration and fixtures.

Environment variables are set before any Settings object is built, so the
DI containers created by the tests pick them up.
"""

import os

import logfire
from tests.factories import TEST_CREDENTIALS_KEY, TEST_SIGNING_KEY
from tests.tokens import GOOGLE_CLIENT_ID, MICROSOFT_CLIENT_ID

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__ACCESS_TOKEN__SIGNING_KEY", TEST_SIGNING_KEY)
os.environ.setdefault("AUTH__GOOGLE__CLIENT_ID", GOOGLE_CLIENT_ID)
os.environ.setdefault("AUTH__MICROSOFT__CLIENT_ID", MICROSOFT_CLIENT_ID)
os.environ.setdefault("AUTH__FACEBOOK__APP_ID", "facebook-app-id")
os.environ.setdefault("AUTH__PROVIDER_CREDENTIALS_KEY", TEST_CREDENTIALS_KEY)

# Keep telemetry local and quiet
logfire.configure(send_to_logfire=False, console=False)
