"""
Audit interception for route handlers.

``audited`` wraps an endpoint so that a successful return produces exactly
one audit entry attributed to the request principal:

    @router.post("/residents", status_code=201)
    @audited(AuditAction.CREATE, "resident", body_field("id"),
             lambda request, body: f"Added resident {body['first_name']} {body['last_name']}")
    async def create_resident(...):
        ...

The wrapper calls the handler, reads its outcome (raised exception, error
Response, or a returned body), and on success hands a draft to the
recorder without awaiting the write. Anonymous requests are never audited.
"""

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastapi import Depends, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from starlette.responses import Response

from backend.app.core.dependencies import get_principal
from backend.app.core.logging_config import get_logger
from backend.app.core.principal import Principal
from backend.app.models.enums import AuditAction
from backend.app.services.audit import AuditEntryDraft, AuditRecorder, get_audit_recorder

IdExtractor = Callable[[Request, Optional[dict]], Optional[str]]
SummaryExtractor = Callable[[Request, Optional[dict]], str]

logger = get_logger("audit")


@dataclass(frozen=True)
class HandlerOutcome:
    """What a handler returned, reduced to success flag and JSON body."""
    succeeded: bool
    body: Optional[dict]

    @classmethod
    def from_result(cls, result: Any) -> "HandlerOutcome":
        if isinstance(result, Response):
            return cls(succeeded=result.status_code < 400, body=None)
        if isinstance(result, BaseModel):
            return cls(succeeded=True, body=result.model_dump(mode="json"))
        if isinstance(result, dict):
            return cls(succeeded=True, body=jsonable_encoder(result))
        return cls(succeeded=True, body=None)


def path_param(name: str) -> IdExtractor:
    """Resource id taken from a URL path parameter."""
    def extract(request: Request, body: Optional[dict]) -> Optional[str]:
        return request.path_params.get(name)
    return extract


def body_field(name: str) -> IdExtractor:
    """Resource id taken from the handler's response body."""
    def extract(request: Request, body: Optional[dict]) -> Optional[str]:
        if not body:
            return None
        return body.get(name)
    return extract


def no_resource_id(request: Request, body: Optional[dict]) -> Optional[str]:
    """Batch operations have no single target."""
    return None


def audited(
    action: AuditAction,
    resource_type: str,
    get_id: IdExtractor,
    get_summary: SummaryExtractor,
):
    """
    Decorator factory attaching audit recording to a FastAPI endpoint.

    The wrapper adds three dependencies to the endpoint signature (request,
    principal, recorder) so FastAPI injects them; the wrapped handler's own
    parameters are untouched.

    Args:
        action: Fixed action for the route (CREATE / UPDATE / DELETE)
        resource_type: Fixed resource tag for the route
        get_id: (request, body) -> resource id or None
        get_summary: (request, body) -> one-line human summary

    Returns:
        Decorator for an async endpoint
    """
    def decorator(endpoint: Callable[..., Any]):
        if not inspect.iscoroutinefunction(endpoint):
            raise TypeError(f"audited() requires an async endpoint, got {endpoint.__name__}")

        signature = inspect.signature(endpoint)
        audit_params = [
            inspect.Parameter("audit_request", inspect.Parameter.KEYWORD_ONLY, annotation=Request),
            inspect.Parameter(
                "audit_principal", inspect.Parameter.KEYWORD_ONLY,
                default=Depends(get_principal), annotation=Optional[Principal],
            ),
            inspect.Parameter(
                "audit_recorder", inspect.Parameter.KEYWORD_ONLY,
                default=Depends(get_audit_recorder), annotation=AuditRecorder,
            ),
        ]

        @functools.wraps(endpoint)
        async def wrapper(
            *args,
            audit_request: Request,
            audit_principal: Optional[Principal],
            audit_recorder: AuditRecorder,
            **kwargs,
        ):
            result = await endpoint(*args, **kwargs)

            outcome = HandlerOutcome.from_result(result)
            if outcome.succeeded and audit_principal is not None:
                try:
                    draft = AuditEntryDraft.for_principal(
                        audit_principal,
                        action=action,
                        resource_type=resource_type,
                        resource_id=get_id(audit_request, outcome.body),
                        summary=get_summary(audit_request, outcome.body),
                    )
                except Exception:
                    logger.exception("AUDIT_WRITE_FAILURE building %s %s entry", action.value, resource_type)
                else:
                    audit_recorder.append(draft)

            return result

        wrapper.__signature__ = signature.replace(
            parameters=[*signature.parameters.values(), *audit_params]
        )
        return wrapper

    return decorator
