import os
from pathlib import Path
from decouple import config, Csv


# BASE DIRECTORY
# BASE_DIR points to the project root (where manage.py is)
BASE_DIR = Path(__file__).resolve().parent.parent


# SECURITY SETTINGS

# SECURITY WARNING: keep the secret key used in production secret!
# Besides sessions and CSRF, it signs the DatabaseGateway access/refresh tokens
SECRET_KEY = config('SECRET_KEY', default='django-insecure-CHANGE-THIS-IN-PRODUCTION')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=True, cast=bool)

# Format: 'domain.com,www.domain.com'
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,0.0.0.0', cast=Csv())


# INSTALLED APPS
INSTALLED_APPS = [
    # Django Channels (must be before django.contrib.staticfiles)
    'daphne',  # ASGI server for WebSocket support

    # Django built-in apps
    'django.contrib.admin',  # Admin interface (DatabaseGateway tables)
    'django.contrib.auth',  # Staff accounts for the DatabaseGateway
    'django.contrib.contenttypes',
    'django.contrib.sessions',  # Backend session + selected staff live here
    'django.contrib.messages',  # Flash notifications
    'django.contrib.staticfiles',

    # Third-party apps
    'crispy_forms',  # Better form rendering
    'crispy_bootstrap5',  # Bootstrap 5 template pack
    'channels',  # WebSocket support (live enquiry list)

    # Our custom apps
    'apps.gateway',  # Data access (REST backend / database backend)
    'apps.accounts',  # Sign in / sign out, route guard
    'apps.core',  # Dashboard, staff selection, diagnostics
    'apps.customers',  # Customer directory
    'apps.enquiries',  # Enquiry pipeline
]


# MIDDLEWARE

# Order matters: the session context needs SessionMiddleware, and the route
# guard needs the session context
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',  # Admin only
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'apps.accounts.middleware.SessionContextMiddleware',  # request.crm
    'apps.accounts.middleware.RouteGuardMiddleware',  # /dashboard/ <-> /login/
]


# URL CONFIGURATION
ROOT_URLCONF = 'config.urls'


# TEMPLATES
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [
            BASE_DIR / 'templates',  # Global templates directory
        ],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',  # request.crm in templates
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


# ASGI/WSGI APPLICATION

# ASGI application (HTTP + WebSocket), served by Daphne
ASGI_APPLICATION = 'config.asgi.application'

# WSGI application (HTTP only, no live updates)
WSGI_APPLICATION = 'config.wsgi.application'


# DATABASE

# Holds Django sessions and admin users; with the DatabaseGateway it also
# holds the customers/enquiries tables. SQLite unless DB_ENGINE is set.
DB_ENGINE = config('DB_ENGINE', default='django.db.backends.sqlite3')

if DB_ENGINE == 'django.db.backends.sqlite3':
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': config('DB_NAME', default=str(BASE_DIR / 'db.sqlite3')),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': config('DB_NAME', default='enquiry_crm'),
            'USER': config('DB_USER', default='enquiry_crm'),
            'PASSWORD': config('DB_PASSWORD', default=''),
            'HOST': config('DB_HOST', default='localhost'),
            'PORT': config('DB_PORT', default='5432'),
            'CONN_MAX_AGE': 600,  # Keep connection open for 10 minutes
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# BACKEND (data + auth)

# Hosted backend: PostgREST rows under /rest/v1/, GoTrue auth under /auth/v1/.
# Without both values the app runs in demo mode (no sign-in, forms disabled).
BACKEND_URL = config('BACKEND_URL', default='')
BACKEND_KEY = config('BACKEND_KEY', default='')

# Seconds before a backend call is treated as unreachable
BACKEND_TIMEOUT = config('BACKEND_TIMEOUT', default=10, cast=int)

# Gateway implementation
# - apps.gateway.backends.rest.RestGateway: hosted backend above
# - apps.gateway.backends.database.DatabaseGateway: this project's database
CRM_GATEWAY_BACKEND = config('CRM_GATEWAY_BACKEND', default='apps.gateway.backends.rest.RestGateway')

# Token lifetimes for the DatabaseGateway (seconds)
CRM_ACCESS_TOKEN_AGE = config('CRM_ACCESS_TOKEN_AGE', default=60 * 60, cast=int)
CRM_REFRESH_TOKEN_AGE = config('CRM_REFRESH_TOKEN_AGE', default=30 * 24 * 60 * 60, cast=int)


# STAFF & ROUTES

# Staff members enquiries can be assigned to
CRM_STAFF = config('CRM_STAFF', default='Amit,Prateek', cast=Csv())

# Paths that need a signed-in session (prefix match)
CRM_PROTECTED_PATHS = ['/dashboard/']

LOGIN_URL = '/login/'  # Redirect here if not signed in
LOGIN_REDIRECT_URL = '/dashboard/'  # Redirect here when already signed in


# SESSIONS
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 30 * 24 * 60 * 60  # "Remember me" upper bound


# INTERNATIONALIZATION
LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='Asia/Kolkata')
USE_I18N = True

# Use timezone-aware datetimes
USE_TZ = True


# STATIC FILES (CSS, JavaScript, Images)
STATIC_URL = '/static/'

STATICFILES_DIRS = [
    BASE_DIR / 'static',  # Global static files
]

# collectstatic target for production
STATIC_ROOT = BASE_DIR / 'staticfiles'


# CRISPY FORMS (Form Styling)
CRISPY_ALLOWED_TEMPLATE_PACKS = 'bootstrap5'
CRISPY_TEMPLATE_PACK = 'bootstrap5'


# CHANNELS (WebSocket)

# Redis when available (needed with more than one server process),
# otherwise an in-process layer
REDIS_URL = config('REDIS_URL', default='')

if REDIS_URL:
    CHANNEL_LAYERS = {
        'default': {
            'BACKEND': 'channels_redis.core.RedisChannelLayer',
            'CONFIG': {
                'hosts': [REDIS_URL],
            },
        },
    }
else:
    CHANNEL_LAYERS = {
        'default': {
            'BACKEND': 'channels.layers.InMemoryChannelLayer',
        },
    }


# CELERY (Background Tasks)

# Celery broker URL (where tasks are queued)
CELERY_BROKER_URL = config('CELERY_BROKER_URL', default=REDIS_URL or 'redis://localhost:6379/0')

# Celery result backend (where results are stored)
CELERY_RESULT_BACKEND = config('CELERY_RESULT_BACKEND', default=CELERY_BROKER_URL)

CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'

CELERY_TIMEZONE = TIME_ZONE

# Celery task time limit (5 minutes)
CELERY_TASK_TIME_LIMIT = 5 * 60

# Celery task soft time limit (4 minutes - gives 1 min for cleanup)
CELERY_TASK_SOFT_TIME_LIMIT = 4 * 60


# LOGGING

LOG_DIR = BASE_DIR / 'logs'
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,

    # Log formatters
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },

    # Log handlers (where to send logs)
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple' if DEBUG else 'verbose',
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'django.log',
            'maxBytes': 1024 * 1024 * 10,  # 10 MB
            'backupCount': 5,
            'formatter': 'verbose',
        },
    },

    # Loggers
    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': config('LOG_LEVEL', default='INFO'),
            'propagate': True,
        },
        'apps': {  # Our custom apps
            'handlers': ['console', 'file'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}
