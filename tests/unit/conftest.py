"""Unit test configuration.

Unit tests run against in-memory doubles and mocked SDK clients; nothing
here talks to Firestore, PostgreSQL or Cloud Storage.
"""

import pytest


pytestmark = pytest.mark.unit
