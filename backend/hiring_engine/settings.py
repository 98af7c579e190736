"""
Django settings for the Hiring Decision Engine.

Uses SQLite by default (PostgreSQL via DB_ENGINE) and django-rest-framework
for the API layer.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-secret-key-change-in-production')

DEBUG = os.environ.get('DEBUG', 'True').lower() in ('true', '1', 'yes')

ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')

# Application definition
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',
    'rest_framework',
    'corsheaders',
    'django_q',
    'screening.apps.ScreeningConfig',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
]

# Don't redirect to add trailing slashes — API clients send exact URLs
APPEND_SLASH = False

ROOT_URLCONF = 'hiring_engine.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
    },
]

WSGI_APPLICATION = 'hiring_engine.wsgi.application'

# Database — PostgreSQL in production, SQLite for local dev
DB_ENGINE = os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3')

if DB_ENGINE == 'django.db.backends.sqlite3':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': os.environ.get('DB_NAME', 'hiring_engine'),
            'USER': os.environ.get('DB_USER', 'postgres'),
            'PASSWORD': os.environ.get('DB_PASSWORD', 'postgres'),
            'HOST': os.environ.get('DB_HOST', 'localhost'),
            'PORT': os.environ.get('DB_PORT', '5432'),
        }
    }

STATIC_URL = '/static/'

# CORS
CORS_ALLOW_ALL_ORIGINS = DEBUG
CORS_ALLOWED_ORIGINS = [
    'http://localhost:3000',
    'http://127.0.0.1:3000',
    'http://localhost:5173',
]

# DRF
REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_PAGINATION_CLASS': None,
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
}

# ─── Agent configuration ─────────────────────────────────────────────────────

# Q-learning
AGENT_LEARNING_RATE = float(os.environ.get('AGENT_LEARNING_RATE', '0.15'))
AGENT_DISCOUNT_FACTOR = float(os.environ.get('AGENT_DISCOUNT_FACTOR', '0.95'))
AGENT_EXPLORATION_RATE = float(os.environ.get('AGENT_EXPLORATION_RATE', '0.05'))
AGENT_EXPLORATION_FLOOR = float(os.environ.get('AGENT_EXPLORATION_FLOOR', '0.01'))
AGENT_EXPLORATION_DECAY = float(os.environ.get('AGENT_EXPLORATION_DECAY', '0.995'))

# Override thresholds on the 0-100 composite score
AGENT_FORCE_HIRE_THRESHOLD = float(os.environ.get('AGENT_FORCE_HIRE_THRESHOLD', '80'))
AGENT_NO_REJECT_THRESHOLD = float(os.environ.get('AGENT_NO_REJECT_THRESHOLD', '70'))
AGENT_STRONG_SIGNAL_THRESHOLD = float(os.environ.get('AGENT_STRONG_SIGNAL_THRESHOLD', '75'))

# Score thresholds for the pattern and neural variants
AGENT_HIRE_THRESHOLD = float(os.environ.get('AGENT_HIRE_THRESHOLD', '75'))
AGENT_CONSIDER_THRESHOLD = float(os.environ.get('AGENT_CONSIDER_THRESHOLD', '55'))

AGENT_MAX_DECISION_HISTORY = int(os.environ.get('AGENT_MAX_DECISION_HISTORY', '500'))
AGENT_MAX_TRAINING_HISTORY = int(os.environ.get('AGENT_MAX_TRAINING_HISTORY', '1000'))

# Seed for the neural variant's weight init and the exploration RNG (empty = random)
AGENT_RANDOM_SEED = os.environ.get('AGENT_RANDOM_SEED', '42')

# Learned-state persistence: "null", "file" or "orm"
AGENT_PERSISTENCE_BACKEND = os.environ.get('AGENT_PERSISTENCE_BACKEND', 'orm')
AGENT_SNAPSHOT_DIR = os.environ.get('AGENT_SNAPSHOT_DIR', str(BASE_DIR / 'agent_state'))
# Queue snapshot writes on the django-q cluster instead of writing inline
AGENT_SNAPSHOT_ASYNC = os.environ.get('AGENT_SNAPSHOT_ASYNC', 'False').lower() in ('true', '1', 'yes')

# django-q2 — lightweight task queue using the ORM broker (no Redis needed)
Q_CLUSTER = {
    'name': 'hiring-engine',
    'workers': 2,
    'timeout': 60,
    'retry': 120,
    'orm': 'default',
    'bulk': 10,
    'catch_up': False,
}

# All datetimes are timezone-aware UTC
USE_TZ = True
TIME_ZONE = 'UTC'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('LOG_LEVEL', 'INFO'),
    },
    'loggers': {
        # Per-outcome learning updates log at INFO; raise this to quiet them
        'screening': {
            'level': os.environ.get('AGENT_LOG_LEVEL', 'INFO'),
        },
        'django_q': {
            'level': 'WARNING',
        },
    },
}
