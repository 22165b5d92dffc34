"""User and auth API routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from src.core.application.security import (
    AuthContext,
    get_current_auth,
    get_current_user_id,
    get_optional_auth,
)
from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.core.interfaces.http.rate_limiting import limiter
from src.core.interfaces.http.response import ApiResponse
from src.modules.users.application.commands import (
    RedeemMagicLinkCommand,
    RequestMagicLinkCommand,
    UpdateProfileCommand,
)
from src.modules.users.application.dependencies import (
    get_redeem_magic_link_handler,
    get_request_magic_link_handler,
    get_update_profile_handler,
    get_user_query_service,
    get_user_stats_service,
)
from src.modules.users.application.handlers import (
    RedeemMagicLinkHandler,
    RequestMagicLinkHandler,
    UpdateProfileHandler,
)
from src.modules.users.application.query_service import (
    UserQueryService,
    to_user_data,
)
from src.modules.users.application.stats_service import UserStatsService
from src.modules.users.domain.exceptions import MagicLinkTokenMissingError
from src.modules.users.interfaces.schemas import (
    AuthUserResponse,
    CurrentUserResponse,
    LogoutResponse,
    MagicLinkResponse,
    RequestMagicLinkRequest,
    UpdateProfileRequest,
    UserProfileResponse,
    UserStatsResponse,
    VerifyTokenResponse,
)

router = APIRouter(tags=["auth"])


@router.post(
    "/auth/magic-link",
    response_model=ApiResponse[MagicLinkResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Request a magic link",
    description="Issue a single-use sign-in link and send it to the email address",
)
@limiter.limit(settings.RATE_LIMIT_MAGIC_LINK)
async def request_magic_link(
    request: Request,
    body: RequestMagicLinkRequest,
    handler: RequestMagicLinkHandler = Depends(get_request_magic_link_handler),
) -> ApiResponse[MagicLinkResponse]:
    issued = await handler.handle(RequestMagicLinkCommand(email=body.email))

    response = MagicLinkResponse(magic_link=issued.exposed_link)
    return ApiResponse.success(data=response, message=response.message)


@router.get(
    "/auth/verify",
    response_model=ApiResponse[VerifyTokenResponse],
    status_code=status.HTTP_200_OK,
    summary="Redeem a magic link",
    description="Consume a magic link token and return a session credential",
)
async def verify_magic_link(
    token: str | None = Query(None, description="Magic link token"),
    handler: RedeemMagicLinkHandler = Depends(get_redeem_magic_link_handler),
) -> ApiResponse[VerifyTokenResponse]:
    if not token:
        raise MagicLinkTokenMissingError()

    session = await handler.handle(RedeemMagicLinkCommand(token=token))

    response = VerifyTokenResponse(
        user=AuthUserResponse(
            id=session.user.id,
            email=session.user.email,
            display_name=session.user.display_name,
        ),
        token=session.access_token,
        expires_at=session.expires_at,
    )
    return ApiResponse.success(data=response, message="Authentication successful")


@router.get(
    "/auth/me",
    response_model=ApiResponse[CurrentUserResponse],
    summary="Current identity",
    description="Identity asserted by the presented session credential",
)
async def get_me(
    auth: AuthContext = Depends(get_current_auth),
) -> ApiResponse[CurrentUserResponse]:
    return ApiResponse.success(
        data=CurrentUserResponse(id=auth.user_id, email=auth.email)
    )


@router.post(
    "/auth/logout",
    response_model=ApiResponse[LogoutResponse],
    summary="Log out",
    description="Credentials are stateless; the client discards its token",
)
async def logout(
    auth: AuthContext | None = Depends(get_optional_auth),
) -> ApiResponse[LogoutResponse]:
    if auth is not None:
        BusinessEvents.user_logged_out(user_id=auth.user_id)
    response = LogoutResponse()
    return ApiResponse.success(data=response, message=response.message)


@router.get(
    "/users/profile",
    response_model=ApiResponse[UserProfileResponse],
    tags=["users"],
    summary="Get profile",
)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    service: UserQueryService = Depends(get_user_query_service),
) -> ApiResponse[UserProfileResponse]:
    user = await service.get_profile(user_id)
    return ApiResponse.success(data=UserProfileResponse(**user.model_dump()))


@router.put(
    "/users/profile",
    response_model=ApiResponse[UserProfileResponse],
    tags=["users"],
    summary="Update profile",
)
async def update_profile(
    request: UpdateProfileRequest,
    user_id: int = Depends(get_current_user_id),
    handler: UpdateProfileHandler = Depends(get_update_profile_handler),
) -> ApiResponse[UserProfileResponse]:
    command = UpdateProfileCommand(user_id=user_id, display_name=request.display_name)
    user = await handler.handle(command)

    return ApiResponse.success(
        data=UserProfileResponse(**to_user_data(user).model_dump()),
        message="Profile updated successfully",
    )


@router.get(
    "/users/stats",
    response_model=ApiResponse[UserStatsResponse],
    tags=["users"],
    summary="Spending statistics",
)
async def get_user_stats(
    user_id: int = Depends(get_current_user_id),
    service: UserStatsService = Depends(get_user_stats_service),
) -> ApiResponse[UserStatsResponse]:
    stats = await service.get_stats(user_id)
    return ApiResponse.success(data=UserStatsResponse(**stats.model_dump()))
