from .base import *

DEBUG = False

# 테스트 속도용 (비밀번호 해시 최소화)
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# 테스트 중 로그 출력 최소화
LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'WARNING'
