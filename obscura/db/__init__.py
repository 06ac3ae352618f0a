"""Database metadata package — declarative base shared by models and migrations."""
