"""
TripNest Backend - Application-State Dependencies
===================================================

create_app() builds the settings, the file service and the OAuth client once
and stores them on app.state. These dependencies hand them to route handlers,
so tests can swap any of them by building the app with different objects.
"""

from fastapi import Request

from tripnest.config import Settings
from tripnest.services.file_service import FileService
from tripnest.services.oauth_service import GoogleOAuthClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_oauth_client(request: Request) -> GoogleOAuthClient:
    return request.app.state.oauth_client
