"""FastAPI dependency providers.

Everything a handler needs is built once by ``create_app()`` and stored on
``app.state``; these providers only read it back, which keeps handlers free
of ambient globals and lets tests override them with
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from voicerelay.core.config import Settings
from voicerelay.services.transcription import BaseTranscriber


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_transcriber(request: Request) -> BaseTranscriber:
    return request.app.state.transcriber


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
TranscriberDep = Annotated[BaseTranscriber, Depends(get_transcriber)]
