"""
Learning Token Routes

The learner's token gallery (list, detail, export, verify, share) and the
public verification link.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from credtube.api.deps import get_request_context
from credtube.core.context import RequestContext
from credtube.core.database import get_db
from credtube.schemas.credential import (
    LearningTokenResponse,
    PublicCredentialView,
    ShareLinks,
    VerificationResult,
)
from credtube.services import credential_service, token_service


router = APIRouter(prefix="/tokens", tags=["Learning Tokens"])

public_router = APIRouter(prefix="/verify", tags=["Verification"])


@router.get(
    "",
    response_model=List[LearningTokenResponse],
    summary="List my learning tokens",
)
async def list_tokens(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[LearningTokenResponse]:
    """All of the caller's tokens, newest first. Not paginated."""
    tokens = await token_service.list_user_tokens(ctx.user_id, db)
    return [LearningTokenResponse.model_validate(t) for t in tokens]


@router.get(
    "/{token_id}",
    response_model=LearningTokenResponse,
    summary="Get a learning token",
)
async def get_token(
    token_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LearningTokenResponse:
    token = await token_service.get_user_token(ctx.user_id, token_id, db)
    return LearningTokenResponse.model_validate(token)


@router.get(
    "/{token_id}/export",
    summary="Download a learning token as JSON",
)
async def export_token(
    token_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JSONResponse:
    """
    Download the credential document merged with its row metadata.

    Served as an attachment named credential-<id>.json.
    """
    token = await token_service.get_user_token(ctx.user_id, token_id, db)
    payload = credential_service.export_credential(token, downloaded_at=ctx.now())
    return JSONResponse(
        content=payload,
        headers={
            "Content-Disposition": f'attachment; filename="credential-{token.id}.json"',
        },
    )


@router.post(
    "/{token_id}/verify",
    response_model=VerificationResult,
    summary="Check a token's integrity string",
)
async def verify_token(
    token_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VerificationResult:
    """
    Run the substring check on the stored integrity string.

    This confirms only that the owner's id appears in the string. It does not
    detect tampering with the document.
    """
    token = await token_service.get_user_token(ctx.user_id, token_id, db)
    verified = credential_service.verify_credential_hash(token)
    return VerificationResult(
        token_id=token.id,
        verified=verified,
        message=(
            "Integrity string references the credential owner"
            if verified
            else "Integrity string does not reference the credential owner"
        ),
    )


@router.get(
    "/{token_id}/share",
    response_model=ShareLinks,
    summary="Get share links for a token",
)
async def share_token(
    token_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ShareLinks:
    token = await token_service.get_user_token(ctx.user_id, token_id, db)
    return credential_service.build_share_links(token, ctx.base_url)


@public_router.get(
    "/{credential_hash}",
    response_model=PublicCredentialView,
    summary="Public view of a credential",
)
async def view_credential(
    credential_hash: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PublicCredentialView:
    """
    Resolve a verification link.

    Raises:
        HTTPException: 404 if unknown, 422 if the stored document is unreadable.
    """
    token = await token_service.lookup_by_hash(credential_hash, db)
    try:
        document = credential_service.read_credential_document(token.credential_json)
    except credential_service.CredentialSchemaError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return PublicCredentialView(
        token_id=token.id,
        status=token.status,
        issued_at=token.issued_at,
        expires_at=token.expires_at,
        subject_did=token.subject_did,
        issuer_did=token.issuer_did,
        credential_json=document.to_json(),
    )
