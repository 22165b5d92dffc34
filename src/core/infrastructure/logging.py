"""Logging configuration with structlog integration.

Two logging channels:
1. loguru: diagnostic and debug logs
2. structlog: structured logs for key business events
"""

import logging
import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    if settings.ENVIRONMENT in ("local", "test"):
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT not in ("local", "test"):
        logger.add(
            "logs/expense_tracker_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def mask_email(email: str) -> str:
    """Mask the local part of an address for logs: ``a***@example.com``."""
    local, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"


# ============================================================================
# Business event logger
# ============================================================================


class BusinessEvents:
    """Structured business event helpers.

    Keeps event names and fields consistent across modules. Token values and
    session credentials are never logged here.

    Usage:
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.magic_link_issued(email="a@example.com", magic_link_id=1, delivered=True)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def magic_link_issued(
        cls,
        email: str,
        magic_link_id: int | None,
        delivered: bool,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "magic_link_issued",
            event_type="auth",
            email=mask_email(email),
            magic_link_id=magic_link_id,
            delivered=delivered,
            **extra,
        )

    @classmethod
    def magic_link_delivery_fallback(
        cls,
        email: str,
        reason: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "magic_link_delivery_fallback",
            event_type="auth",
            email=mask_email(email),
            reason=reason,
            **extra,
        )

    @classmethod
    def magic_link_redeemed(
        cls,
        user_id: int,
        magic_link_id: int | None,
        new_user: bool,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "magic_link_redeemed",
            event_type="auth",
            user_id=user_id,
            magic_link_id=magic_link_id,
            new_user=new_user,
            **extra,
        )

    @classmethod
    def magic_link_redeem_rejected(cls, **extra: Any) -> None:
        cls._log.warning(
            "magic_link_redeem_rejected",
            event_type="auth",
            **extra,
        )

    @classmethod
    def user_registered(cls, user_id: int, email: str, **extra: Any) -> None:
        cls._log.info(
            "user_registered",
            event_type="user",
            user_id=user_id,
            email=mask_email(email),
            **extra,
        )

    @classmethod
    def profile_updated(
        cls, user_id: int, updated_fields: list[str], **extra: Any
    ) -> None:
        cls._log.info(
            "profile_updated",
            event_type="user",
            user_id=user_id,
            updated_fields=updated_fields,
            **extra,
        )

    @classmethod
    def user_logged_out(cls, user_id: int, **extra: Any) -> None:
        cls._log.info("user_logged_out", event_type="auth", user_id=user_id, **extra)

    @classmethod
    def expense_created(
        cls,
        user_id: int,
        expense_id: int,
        amount: str,
        category: str,
        **extra: Any,
    ) -> None:
        cls._log.info(
            "expense_created",
            event_type="expense",
            user_id=user_id,
            expense_id=expense_id,
            amount=amount,
            category=category,
            **extra,
        )

    @classmethod
    def expense_updated(
        cls,
        user_id: int,
        expense_id: int,
        updated_fields: list[str],
        **extra: Any,
    ) -> None:
        cls._log.info(
            "expense_updated",
            event_type="expense",
            user_id=user_id,
            expense_id=expense_id,
            updated_fields=updated_fields,
            **extra,
        )

    @classmethod
    def expense_deleted(cls, user_id: int, expense_id: int, **extra: Any) -> None:
        cls._log.info(
            "expense_deleted",
            event_type="expense",
            user_id=user_id,
            expense_id=expense_id,
            **extra,
        )

    @classmethod
    def email_sent(
        cls,
        to_email: str,
        email_type: str,
        success: bool,
        **extra: Any,
    ) -> None:
        level = "info" if success else "warning"
        getattr(cls._log, level)(
            "email_sent",
            event_type="email",
            to_email=mask_email(to_email),
            email_type=email_type,
            success=success,
            **extra,
        )
