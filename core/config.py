"""
SecureAuth Configuration System
Environment-aware configuration supporting development, staging, and production modes
"""
import os
import logging


class EnvironmentConfig:
    """Centralized environment configuration"""

    def __init__(self):
        self.ENVIRONMENT = os.getenv('ENVIRONMENT', 'development').lower()
        print(f"[SecureAuth] Initializing with ENVIRONMENT={self.ENVIRONMENT}")
        print(f"  SUPABASE_URL: {os.getenv('SUPABASE_URL', 'Not set')}")
        print(f"  SUPABASE_ANON_KEY: {'Set' if os.getenv('SUPABASE_ANON_KEY') else 'Not set'}")
        print(f"  SITE_URL: {os.getenv('SITE_URL', 'Not set')}")

    @property
    def is_development(self):
        return self.ENVIRONMENT == 'development'

    @property
    def is_staging(self):
        return self.ENVIRONMENT == 'staging'

    @property
    def is_production(self):
        return self.ENVIRONMENT == 'production'

    @property
    def debug_mode(self):
        """Enable debug mode in development"""
        return self.is_development

    @property
    def https_only_cookies(self):
        """Session cookies are only sent over HTTPS outside development"""
        return self.ENVIRONMENT in ['staging', 'production']

    @property
    def use_redis_sessions(self):
        """Keep provider sessions in Redis outside development"""
        return SESSION_BACKEND == 'redis'

    @property
    def provider_configured(self):
        return bool(SUPABASE_URL and SUPABASE_ANON_KEY)


# Identity provider
SUPABASE_URL = os.environ.get('SUPABASE_URL', '').rstrip('/')
SUPABASE_ANON_KEY = os.environ.get('SUPABASE_ANON_KEY', '')

# Public origin used to build redirect targets. Falls back to the request's base URL.
SITE_URL = os.environ.get('SITE_URL', '').rstrip('/')

# Server-side provider session storage: "memory" or "redis"
_default_backend = 'memory' if os.getenv('ENVIRONMENT', 'development').lower() == 'development' else 'redis'
SESSION_BACKEND = os.environ.get('SESSION_BACKEND', _default_backend).lower()
REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')

# Global instance
config = EnvironmentConfig()

# Setup logging
LOG_FILE = os.environ.get('LOG_FILE', '')

logger = logging.getLogger("secureauth")
logger.setLevel(logging.DEBUG if config.debug_mode else logging.INFO)

formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

if not logger.handlers:
    # Console handler
    c_handler = logging.StreamHandler()
    c_handler.setLevel(logging.DEBUG if config.debug_mode else logging.INFO)
    c_handler.setFormatter(formatter)
    logger.addHandler(c_handler)

    # File handler
    if LOG_FILE:
        os.makedirs(os.path.dirname(os.path.abspath(LOG_FILE)), exist_ok=True)
        f_handler = logging.FileHandler(LOG_FILE)
        f_handler.setLevel(logging.INFO)
        f_handler.setFormatter(formatter)
        logger.addHandler(f_handler)

# Security configuration
SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME', 'secureauth_session')
SESSION_MAX_AGE_SECONDS = int(os.environ.get('SESSION_MAX_AGE_SECONDS', 14 * 24 * 60 * 60))

# Application configuration
APP_NAME = os.environ.get('APP_NAME', 'SecureAuth')
CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

# Redirect targets handed to the provider, relative to the site origin
RESET_PASSWORD_PATH = '/auth/reset-password'
DASHBOARD_PATH = '/dashboard'

logger.info(f"SecureAuth configuration initialized - Environment: {config.ENVIRONMENT}")
logger.info(f"Identity provider: {'Configured' if config.provider_configured else 'Not configured'}")
logger.info(f"Session backend: {SESSION_BACKEND}")
logger.info(f"Debug mode: {'Enabled' if config.debug_mode else 'Disabled'}")
