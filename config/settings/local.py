import environ
from celery.schedules import crontab

from .base import *  # Import defaults from base.py

# Initialize environment variables
env = environ.Env()

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY", default="django-insecure-dev-key")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = ["*"]

# Database
# 'env.db()' automatically parses the 'DATABASE_URL' from docker-compose.yml
# e.g., postgres://postgres:postgres@db:5432/points_ledger
DATABASES = {
    "default": env.db("DATABASE_URL", default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": env("REDIS_URL", default="redis://redis:6379/0"),
        "OPTIONS": {
            "CLIENT_CLASS": "django_redis.client.DefaultClient",
        },
    }
}

CELERY_BEAT_SCHEDULE = {
    "verify_points_balances_nightly": {
        "task": "loyalty.tasks.verify_points_balances",
        # Run at 03:15 every night
        "schedule": crontab(minute=15, hour=3),
    },
}

LOGGING["loggers"]["loyalty"]["level"] = "DEBUG"
