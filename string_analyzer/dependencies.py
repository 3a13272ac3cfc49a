from fastapi import Request

from string_analyzer.crud.string_repository import StringRepository
from string_analyzer.services.string_service import StringService


def get_service(request: Request) -> StringService:
    """Dependency to provide the string service owned by the running app."""
    return request.app.state.string_service


def get_repository(request: Request) -> StringRepository:
    return request.app.state.repository
