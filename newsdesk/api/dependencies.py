"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from newsdesk.config.settings import Settings
from newsdesk.dispatch import Dispatcher
from newsdesk.infrastructure import Infrastructure


def get_infrastructure(request: Request) -> Infrastructure:
    return request.app.state.infra


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.infra.dispatcher


def get_app_settings(request: Request) -> Settings:
    return request.app.state.infra.settings


InfrastructureDep = Annotated[Infrastructure, Depends(get_infrastructure)]
DispatcherDep = Annotated[Dispatcher, Depends(get_dispatcher)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
