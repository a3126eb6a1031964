from dataclasses import dataclass
from typing import Sequence

from fastapi import APIRouter

import chat_sandbox.chat.routes as chat
import chat_sandbox.compression.routes as compression
import chat_sandbox.llm.routes as llm
import chat_sandbox.routers.system as system
from chat_sandbox.api.endpoints import ENDPOINTS


@dataclass
class RouterConfig:
    router: APIRouter
    prefix: str
    tags: Sequence[str]


routers = [
    RouterConfig(system.router, "", ["System"]),
    RouterConfig(llm.router, ENDPOINTS.PREFIX, ["Models"]),
    RouterConfig(chat.router, ENDPOINTS.PREFIX, ["Chat Sessions"]),
    RouterConfig(compression.router, ENDPOINTS.PREFIX, ["Compression"]),
]
