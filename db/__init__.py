"""Database package for the influencer campaign dashboard."""
from db.connection import create_all, dispose_engine, get_db, get_engine, init_engine

__all__ = ["init_engine", "get_engine", "get_db", "create_all", "dispose_engine"]
