from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_settings(container: ApplicationContainer = Depends(get_container)):
    return container.settings


def get_token_service(container: ApplicationContainer = Depends(get_container)):
    return container.token_service


def get_user_repository(container: ApplicationContainer = Depends(get_container)):
    return container.user_repository


def get_create_user(container: ApplicationContainer = Depends(get_container)):
    return container.create_user


def get_authenticate_user(container: ApplicationContainer = Depends(get_container)):
    return container.authenticate_user


def get_refresh_session(container: ApplicationContainer = Depends(get_container)):
    return container.refresh_session


def get_logout(container: ApplicationContainer = Depends(get_container)):
    return container.logout


def get_auth_rate_limiter(container: ApplicationContainer = Depends(get_container)):
    return container.auth_rate_limiter


def get_project_service(container: ApplicationContainer = Depends(get_container)):
    return container.project_service


def get_task_service(container: ApplicationContainer = Depends(get_container)):
    return container.task_service
