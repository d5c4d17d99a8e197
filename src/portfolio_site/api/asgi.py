"""ASGI entrypoint for the portfolio contact API."""

from portfolio_site.api.app import create_app
from portfolio_site.containers import build_container

app = create_app(build_container())
