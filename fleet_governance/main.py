"""FastAPI application entry point for the fleet governance engine.

This module creates the FastAPI application, registers the resource,
labeling, advisory and audit endpoints, configures CORS and middleware,
and sets up error handling.
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from . import __version__
from .config import Settings, settings as get_default_settings
from .container import ServiceContainer
from .middleware.audit_middleware import audit_operation
from .middleware.correlation_middleware import CorrelationIDMiddleware
from .models import (
    AdvisoryResult,
    AuditLogEntry,
    AuditStatus,
    Change,
    FacetCounts,
    FilterConfig,
    FleetSummary,
    HealthStatus,
    LabelRule,
    LabelValidationError,
    PageResult,
    Resource,
    ResourcePreview,
    RuleValidation,
    StrategyKind,
)
from .services.changeset_service import build_apply_payload, preview_rule
from .services.resource_store import (
    FingerprintConflictError,
    ResourceNotFoundError,
    RevertError,
)
from .services.strategy_service import build_rule, tokenize_sample, validate_rule

logger = logging.getLogger(__name__)


# Request/Response models
class QueryRequest(BaseModel):
    """Request model for a table page query."""
    config: FilterConfig = Field(default_factory=FilterConfig)
    page: int = 1
    page_size: Optional[int] = None
    collapsed_groups: list[str] = Field(default_factory=list)


class RuleRequest(BaseModel):
    """Request model for previewing a label rule over a selection."""
    kind: StrategyKind
    parameters: dict[str, Any] = Field(default_factory=dict)
    resource_ids: list[str] = Field(default_factory=list)
    sample_name: Optional[str] = None


class ApplyRequest(RuleRequest):
    """Request model for applying a label rule."""
    actor: Optional[str] = None
    expected_fingerprints: dict[str, str] = Field(default_factory=dict)


class RevertRequest(BaseModel):
    """Request model for reverting a resource's last label change."""
    actor: Optional[str] = None


class AnalyzeRequest(BaseModel):
    """Request model for naming-convention analysis."""
    resource_ids: list[str] = Field(default_factory=list)
    current_kind: Optional[StrategyKind] = None
    current_parameters: dict[str, Any] = Field(default_factory=dict)


class PreviewResponse(BaseModel):
    """Response model for a rule preview."""
    kind: StrategyKind
    validation: RuleValidation
    selected_count: int
    affected_count: int
    items: dict[str, ResourcePreview]
    tokens: list[dict[str, Any]] = Field(default_factory=list)


class ApplyResponse(BaseModel):
    """Response model for an applied rule."""
    applied_count: int
    changes: dict[str, list[Change]]
    resources: list[Resource]


class AnalyzeResponse(BaseModel):
    """Response model for naming-convention analysis."""
    result: AdvisoryResult
    prefill: Optional[LabelRule] = None


class LabelKeysResponse(BaseModel):
    """Response model for the available label keys."""
    keys: list[str]


def _service_unavailable(name: str) -> HTTPException:
    return HTTPException(status_code=503, detail=f"{name} not initialized")


def create_app(
    app_settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Application settings; loaded from the environment if None
        container: Pre-built service container (mainly for tests)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or get_default_settings()
    container = container or ServiceContainer(settings=app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize services on startup and release them on shutdown."""
        logger.info("Starting Fleet Governance service")
        await container.initialize()
        logger.info(
            f"Fleet Governance v{__version__} started with "
            f"{len(container.store)} resources on port {app_settings.port}"
        )

        yield

        logger.info("Shutting down Fleet Governance service")
        await container.shutdown()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Fleet Governance",
        description=(
            "Label governance for cloud resource fleets: faceted filtering, "
            "grouped tables, and rule-based label changes with preview, "
            "apply and revert."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIDMiddleware)

    def get_audit_service():
        return container.audit_service

    def require_store():
        if container.store is None:
            raise _service_unavailable("Resource store")
        return container.store

    def require_inventory():
        if container.inventory_service is None:
            raise _service_unavailable("Inventory service")
        return container.inventory_service

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------

    @app.exception_handler(ResourceNotFoundError)
    async def resource_not_found_handler(request: Request, exc: ResourceNotFoundError):
        return JSONResponse(
            status_code=404,
            content={"error": "Resource not found", "resource_id": exc.resource_id},
        )

    @app.exception_handler(FingerprintConflictError)
    async def fingerprint_conflict_handler(request: Request, exc: FingerprintConflictError):
        return JSONResponse(
            status_code=409,
            content={"error": "Label fingerprint conflict", "conflicts": exc.conflicts},
        )

    @app.exception_handler(RevertError)
    async def revert_error_handler(request: Request, exc: RevertError):
        return JSONResponse(
            status_code=409,
            content={"error": "Nothing to revert", "message": str(exc)},
        )

    @app.exception_handler(LabelValidationError)
    async def label_validation_handler(request: Request, exc: LabelValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid labels", "errors": exc.errors},
        )

    @app.exception_handler(ValidationError)
    async def rule_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid rule parameters", "message": str(exc)},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "message": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a structured error response.
        """
        correlation_id = getattr(request.state, "correlation_id", None)
        logger.error(
            f"Unhandled exception: {str(exc)}",
            exc_info=True,
            extra={"correlation_id": correlation_id},
        )

        audit_service = container.audit_service
        if audit_service:
            audit_service.log_invocation(
                operation="unknown",
                parameters={"path": str(request.url.path)},
                status=AuditStatus.FAILURE,
                error_message=str(exc),
                correlation_id=correlation_id,
            )

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc),
            },
        )

    # ------------------------------------------------------------------
    # Service endpoints
    # ------------------------------------------------------------------

    @app.get("/health", response_model=HealthStatus)
    async def health_check() -> HealthStatus:
        """
        Health check endpoint for monitoring server status.

        Returns:
            HealthStatus with server status, version, and connectivity information
        """
        redis_connected = False
        if container.redis_cache:
            redis_connected = await container.redis_cache.is_connected()

        sqlite_connected = False
        if container.audit_service:
            try:
                conn = sqlite3.connect(container.audit_service.db_path)
                try:
                    conn.execute("SELECT 1")
                finally:
                    conn.close()
                sqlite_connected = True
            except sqlite3.Error as e:
                logger.warning(f"SQLite connectivity check failed: {e}")

        # Degraded if an optional collaborator is unavailable
        if container.store is None:
            status = "unhealthy"
        elif sqlite_connected and (redis_connected or not app_settings.redis_enabled):
            status = "healthy"
        else:
            status = "degraded"

        return HealthStatus(
            status=status,
            version=__version__,
            resource_count=len(container.store) if container.store is not None else 0,
            redis_connected=redis_connected,
            sqlite_connected=sqlite_connected,
        )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Fleet Governance",
            "version": __version__,
            "description": "Label governance for cloud resource fleets",
            "health_check": "/health",
            "api_prefix": "/api/v1",
        }

    router = APIRouter(prefix="/api/v1")

    @router.get("/resources/{resource_id}", response_model=Resource)
    async def get_resource(resource_id: str) -> Resource:
        """Return one resource with its labels and history."""
        return require_store().get(resource_id)

    @router.post("/resources/query", response_model=PageResult)
    async def query_resources(request: QueryRequest) -> PageResult:
        """Filter, sort, group and paginate the inventory."""
        page_size = request.page_size or app_settings.default_page_size
        if page_size > app_settings.max_page_size:
            raise HTTPException(
                status_code=422,
                detail=f"page_size must not exceed {app_settings.max_page_size}",
            )
        return await require_inventory().query_page(
            request.config,
            page=request.page,
            page_size=page_size,
            collapsed_groups=request.collapsed_groups,
        )

    @router.post("/resources/facets", response_model=FacetCounts)
    async def resource_facets(config: FilterConfig) -> FacetCounts:
        """Count resources per dimension value for the active filter."""
        return await require_inventory().facets(config)

    @router.post("/resources/{resource_id}/revert", response_model=Resource)
    @audit_operation("labels.revert", get_audit_service)
    async def revert_resource(
        resource_id: str, request: Optional[RevertRequest] = None
    ) -> Resource:
        """Restore the labels a resource had before its last change."""
        actor = (request.actor if request else None) or app_settings.default_actor
        return require_store().revert(resource_id, actor=actor)

    @router.get("/labels/keys", response_model=LabelKeysResponse)
    async def label_keys() -> LabelKeysResponse:
        """List the label keys present in the inventory."""
        return LabelKeysResponse(keys=require_store().label_keys())

    @router.post("/labels/preview", response_model=PreviewResponse)
    async def preview_labels(request: RuleRequest) -> PreviewResponse:
        """Preview the label changes a rule would make on a selection."""
        store = require_store()
        rule = build_rule(request.kind, request.parameters)
        preview = preview_rule(rule, store.get_many(request.resource_ids))

        tokens = []
        if request.sample_name is not None and request.kind == StrategyKind.PATTERN:
            tokens = tokenize_sample(request.sample_name, rule.delimiter)

        return PreviewResponse(
            kind=preview.kind,
            validation=validate_rule(rule, container.validator),
            selected_count=preview.selected_count,
            affected_count=preview.affected_count,
            items=preview.items,
            tokens=tokens,
        )

    @router.post("/labels/apply", response_model=ApplyResponse)
    @audit_operation("labels.apply", get_audit_service)
    async def apply_labels(request: ApplyRequest) -> ApplyResponse:
        """Apply a rule to a selection after passing the validity gate."""
        store = require_store()
        rule = build_rule(request.kind, request.parameters)

        validation = validate_rule(rule, container.validator)
        if not validation.is_valid:
            raise HTTPException(status_code=422, detail=validation.model_dump())

        preview = preview_rule(rule, store.get_many(request.resource_ids))
        payload = build_apply_payload(preview)
        expected = {
            resource_id: fingerprint
            for resource_id, fingerprint in request.expected_fingerprints.items()
            if resource_id in payload
        }
        updated = store.apply_label_updates(
            payload,
            actor=request.actor or app_settings.default_actor,
            expected_fingerprints=expected,
        )
        return ApplyResponse(
            applied_count=len(updated),
            changes=preview.changes,
            resources=updated,
        )

    @router.post("/labels/analyze", response_model=AnalyzeResponse)
    def analyze_labels(request: AnalyzeRequest) -> AnalyzeResponse:
        """Suggest a pattern or regex rule from the selected resource names."""
        advisory_service = container.advisory_service
        if advisory_service is None:
            raise _service_unavailable("Advisory service")

        names = [resource.name for resource in require_store().get_many(request.resource_ids)]
        result = advisory_service.analyze_names(names)

        current = None
        if request.current_kind is not None:
            current = build_rule(request.current_kind, request.current_parameters)
        return AnalyzeResponse(result=result, prefill=advisory_service.prefill_rule(result, current))

    @router.get("/fleet/summary", response_model=FleetSummary)
    async def fleet_summary() -> FleetSummary:
        """Dashboard indicators for the whole inventory."""
        return await require_inventory().summary()

    @router.get("/audit", response_model=list[AuditLogEntry])
    async def audit_logs(
        operation: Optional[str] = None,
        status: Optional[AuditStatus] = None,
        resource_id: Optional[str] = None,
        limit: int = 100,
    ) -> list[AuditLogEntry]:
        """Return recent audit entries, newest first."""
        if container.audit_service is None:
            raise _service_unavailable("Audit service")
        return container.audit_service.get_logs(
            operation=operation, status=status, limit=limit, resource_id=resource_id
        )

    app.include_router(router)
    return app


app = create_app()
