from fastapi import APIRouter

from chat_sandbox.api.endpoints import ENDPOINTS
from chat_sandbox.llm.catalog import get_available_models
from chat_sandbox.llm.schemas import ModelsResponse

router = APIRouter()


@router.get(path=ENDPOINTS.MODELS, response_model=ModelsResponse)
async def get_models():
    """
    Returns the chat models that sessions can be created with, including their pricing.
    """
    return ModelsResponse(models=get_available_models())
