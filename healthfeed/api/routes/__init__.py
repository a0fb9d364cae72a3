"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- accounts.py : Session identity, placeholder logins, logout
- articles.py : Feeds, single articles, publishing and editing
- doctors.py  : Doctor profiles
- health.py   : Health check endpoints
- spa.py      : Client bundle and single-page app fallback (mount last)
"""
from healthfeed.api.routes.accounts import router as accounts_router
from healthfeed.api.routes.articles import router as articles_router
from healthfeed.api.routes.doctors import router as doctors_router
from healthfeed.api.routes.health import router as health_router
from healthfeed.api.routes.spa import router as spa_router

__all__ = [
    "accounts_router",
    "articles_router",
    "doctors_router",
    "health_router",
    "spa_router",
]
