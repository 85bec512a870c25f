from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from autoadmin import __version__
from autoadmin.adminpanel import AdminPanel, PanelConfig, allow_all
from autoadmin.api.models import SEED_PERSONAS, Base, Persona
from autoadmin.config import Settings, get_settings
from autoadmin.integrations.fastapi import FastAPIIntegrator
from autoadmin.integrations.sqlalchemy import SQLAlchemyIntegrator

logger = logging.getLogger(__name__)


def create_session_factory(database_url: str) -> sessionmaker:
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


def seed_personas(session_factory: sessionmaker) -> int:
    """Insert the sample personas into an empty table; returns rows added."""
    with session_factory() as session:
        count = session.execute(select(func.count()).select_from(Persona)).scalar_one()
        if count:
            return 0
        session.add_all([Persona(**row) for row in SEED_PERSONAS])
        session.commit()
    logger.info("Seeded %d personas", len(SEED_PERSONAS))
    return len(SEED_PERSONAS)


def create_app(settings: Optional[Settings] = None, database_url: Optional[str] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.NAME, version=__version__)

    session_factory = create_session_factory(database_url or settings.DATABASE_URL)
    seed_personas(session_factory)

    panel = AdminPanel(
        orm=SQLAlchemyIntegrator(session_factory),
        web=FastAPIIntegrator(app),
        permission_func=allow_all,
        config=PanelConfig.from_settings(settings),
    )
    personas = panel.register_app("Personas", "Persona Management")
    personas.register_model(Persona)

    app.state.admin_panel = panel
    app.state.session_factory = session_factory

    @app.get("/", include_in_schema=False)
    def index() -> dict:
        return {
            "message": settings.NAME,
            "version": __version__,
            "admin": panel.config.get_prefix() or "/",
        }

    return app
