import os
import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

# Only initialize once
if not django.apps.apps.ready:
    django.setup()

import pytest
from django.core.cache import cache

from foodAnalytics.utils.tokens import issue_token
from tests.factories import UserFactory


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    return UserFactory(email="ana@example.com", first_name="Ana")


@pytest.fixture
def auth_header(user):
    return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(user.pk)}"}


@pytest.fixture
def upload_dir(settings, tmp_path):
    target = tmp_path / "uploads"
    settings.ORDER_UPLOAD_DIR = str(target)
    return target
