# ruff: noqa: B008
from fastapi import APIRouter, Body

from chat_sandbox.api.endpoints import ENDPOINTS
from chat_sandbox.chat.schemas import VerifyKeyRequest, VerifyKeyResponse
from chat_sandbox.compression.client import CompressionClient

router = APIRouter()


@router.post(path=ENDPOINTS.COMPRESSION_VERIFY_KEY, response_model=VerifyKeyResponse)
async def verify_compression_key(data: VerifyKeyRequest = Body(...)):
    valid, error = await CompressionClient.verify_api_key(data.api_key)
    return VerifyKeyResponse(valid=valid, error=error)
