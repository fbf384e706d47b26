"""
Upload Guidance Route
"""

from fastapi import APIRouter, Depends

from legitmind.dependencies import get_gateway
from legitmind.models.schemas import GuidanceOutput, GuidanceRequest
from legitmind.services.ai_gateway import AIGateway

router = APIRouter()


@router.post("/guidance", response_model=GuidanceOutput)
async def upload_guidance(request: GuidanceRequest, gateway: AIGateway = Depends(get_gateway)):
    """Short answer (at most two sentences) about the upload process"""
    return await gateway.guidance(request.question)
