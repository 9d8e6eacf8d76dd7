"""
crudcore: reusable CRUD layers (repository, service, controller) for FastAPI
services backed by MongoDB.
"""
