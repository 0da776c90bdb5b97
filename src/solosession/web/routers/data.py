from typing import cast

from fastapi import APIRouter
from pydantic import BaseModel, Field

from solosession.web.deps import ClaimedAccountDep, SessionDep
from solosession.web.openapi import ErrorResponse

router = APIRouter(tags=["data"])


class DataResponse(BaseModel):
    """Protected payload for the session owner."""

    ok: bool = True
    username: str = Field(..., description="Account owning the session")
    session_id: str = Field(..., description="Session currently claiming the account")


@router.get(
    "/data",
    summary="Get protected data",
    description="Only reachable with the session that currently owns the account.",
    operation_id="getData",
    responses={
        200: {"description": "Protected data"},
        401: {"model": ErrorResponse, "description": "Not authenticated, superseded, invalidated or expired"},
    },
)
async def get_data(account: ClaimedAccountDep, session: SessionDep) -> DataResponse:
    # The guard only passes when the presented id is the account claim
    return DataResponse(username=account.username, session_id=cast(str, session.session_id))
