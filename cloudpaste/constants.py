from enum import StrEnum


class Defaults:
    """Default values used across the application."""

    ID_LENGTH = 10  # Fixed length of generated paste IDs
    ID_SALT = 'default_salt'  # Salt for the ID permutation (override via ID_SALT)
    BASE_URL = 'http://localhost:3000'  # Fallback public URL for local invocations
    MAX_DECREMENT_ATTEMPTS = 5  # Optimistic lock retries before giving up on a decrement


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        BASE_URL = 'BASE_URL'
        ID_SALT = 'ID_SALT'
        TEST_MODE = 'TEST_MODE'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Request header carrying a test clock override (only honoured when TEST_MODE=1)
TEST_NOW_HEADER = 'x-test-now-ms'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
