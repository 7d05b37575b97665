# settings/test.py
from .base import *

DEBUG = False
SECRET_KEY = 'handyhub-test-secret-key-used-only-by-the-test-suite'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

MARKETPLACE = {
    **MARKETPLACE,
    'PUSH_PROVIDER': 'marketplace.services.notifications.ConsolePushProvider',
}
