"""Database package"""
from chronos.db.session import get_db, SessionLocal, engine, init_models

__all__ = ["get_db", "SessionLocal", "engine", "init_models"]
