from autoadmin.integrations.fastapi import FastAPIIntegrator, RequestContext
from autoadmin.integrations.memory import MemoryIntegrator
from autoadmin.integrations.sqlalchemy import SQLAlchemyIntegrator

__all__ = ["FastAPIIntegrator", "RequestContext", "MemoryIntegrator", "SQLAlchemyIntegrator"]
