from __future__ import annotations
from typing import Annotated

from fastapi import Depends, Request

from src.config import Settings
from src.feature_modules.frontend.proxy import FrontendProxy
from src.feature_modules.transcription.adapters.deepgram import Transcriber

# Everything here is built once in create_app() and parked on app.state,
# so tests can hand the factory their own doubles.

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_transcriber(request: Request) -> Transcriber:
    return request.app.state.transcriber

def get_frontend_proxy(request: Request) -> FrontendProxy:
    return request.app.state.frontend_proxy


SettingsDep = Annotated[Settings, Depends(get_settings)]
TranscriberDep = Annotated[Transcriber, Depends(get_transcriber)]
FrontendProxyDep = Annotated[FrontendProxy, Depends(get_frontend_proxy)]
