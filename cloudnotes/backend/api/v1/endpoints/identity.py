"""
Identity Endpoint.

Tells a client who it is authenticated as.
"""

from fastapi import APIRouter

from cloudnotes.backend.core.dependencies import CurrentIdentity, RequestId
from cloudnotes.backend.schemas.base import ApiResponse, ResponseMetadata
from cloudnotes.backend.schemas.note import IdentityResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[IdentityResponse],
    summary="Current identity",
)
async def get_me(
    identity: CurrentIdentity,
    request_id: RequestId,
) -> ApiResponse[IdentityResponse]:
    return ApiResponse(
        data=IdentityResponse(owner_id=identity.owner_id, email=identity.email),
        metadata=ResponseMetadata(request_id=request_id),
    )
