"""Admin-service dependencies."""

from fastapi import Request

from smartcity.services.audit import AuditLogger
from smartcity.services.identity_client import IdentityServiceClient


def get_identity_client(request: Request) -> IdentityServiceClient:
    return request.app.state.identity_client


def get_audit_logger(request: Request) -> AuditLogger:
    return request.app.state.audit_logger
