"""
Publisher - Test Settings
===========================
Minimal Django settings for pytest-django.
"""

SECRET_KEY = "publisher-test-key"

DEBUG = False

INSTALLED_APPS = [
    "publisher",
]

DATABASES = {}

USE_TZ = True

PUBLISHER_LISTENERS = []
PUBLISHER_LISTENER_TYPES = {}
