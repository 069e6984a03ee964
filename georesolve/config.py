from datetime import timedelta
from logging.config import dictConfig
from typing import Literal

from githead import githead
from pydantic import Field

from georesolve.lib.pydantic_settings_integration import pydantic_settings_integration

# -------------------- System Configuration --------------------

# Core settings
ENV: Literal['dev', 'test', 'prod'] = 'prod'
LOG_LEVEL: Literal['DEBUG', 'INFO', 'WARNING'] | None = None

# -------------------- External Services --------------------

NOMINATIM_URL = 'https://nominatim.openstreetmap.org'
OPEN_METEO_ARCHIVE_URL = 'https://archive-api.open-meteo.com/v1/archive'
OVERPASS_INTERPRETER_URL = 'https://overpass-api.de/api/interpreter'

# HTTP settings
HTTP_TIMEOUT = timedelta(seconds=20)

# Overpass server-side execution hints
OVERPASS_REGIONS_TIMEOUT = timedelta(seconds=180)
OVERPASS_LOOKUP_TIMEOUT = timedelta(seconds=60)

# Nominatim lookup
NOMINATIM_LOOKUP_BATCH_SIZE: int = Field(50, gt=0, le=50)  # service hard limit
NOMINATIM_LOOKUP_LANGUAGE = 'en'

# -------------------- Search --------------------

# admin_level=4 is usually a region well-known by its name, but smaller than a whole country
REGION_ADMIN_LEVEL: int = Field(4, ge=1, le=11)
BOUNDING_BOX_MAX_DIMENSION_KM: float = Field(2000.0, gt=0)

# Weather
HISTORICAL_WEATHER_YEARS: int = Field(3, ge=1)

pydantic_settings_integration(__name__, globals())

# -------------------- Constant or derived configuration --------------------

try:
    VERSION = 'git#' + githead()[:7]
except FileNotFoundError:
    VERSION = 'dev'  # pyright: ignore [reportConstantRedefinition]

NAME = 'georesolve'
WEBSITE = 'https://github.com/georesolve/georesolve'
USER_AGENT = f'{NAME}/{VERSION} (+{WEBSITE})'

if LOG_LEVEL is None:
    LOG_LEVEL = 'INFO' if ENV == 'prod' else 'DEBUG'  # pyright: ignore[reportConstantRedefinition]

# -------------------- Logging configuration --------------------

dictConfig({
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(levelname)s | %(asctime)s | %(name)s %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'default': {
            'formatter': 'default',
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stderr',
        },
    },
    'loggers': {
        'root': {'handlers': ['default'], 'level': LOG_LEVEL},
        **{
            # reduce logging verbosity of some modules
            module: {'handlers': [], 'level': 'INFO'}
            for module in (
                'httpx',
                'httpcore',
            )
        },
    },
})
