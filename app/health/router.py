"""
Deployment Health Check Endpoint
================================
Returns the status of the quiz API components.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app import __version__

router = APIRouter(prefix="/api/v1/health", tags=["Health"])


@router.get("")
def deployment_health():
    """
    Component health check.
    Catalog loaded, database reachable, contacts API key present.
    """
    from app.quiz.catalog import get_catalog
    from app.submissions.router import get_submission_coordinator

    status = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "api_version": __version__,
        "components": {}
    }

    # Question catalog
    try:
        catalog = get_catalog()
        status["components"]["catalog"] = {
            "status": "healthy",
            "categories": catalog.slugs,
            "questions": sum(len(c.questions) for c in catalog.categories),
        }
    except Exception as e:
        status["components"]["catalog"] = {"status": "error", "error": str(e)}

    try:
        coordinator = get_submission_coordinator()
    except Exception as e:
        coordinator = None
        status["components"]["submissions"] = {"status": "error", "error": str(e)}

    if coordinator is not None:
        store = coordinator.store
        if getattr(store, "is_configured", False):
            reachable = store.ping()
            status["components"]["database"] = (
                {"status": "healthy", "collection": store.collection}
                if reachable else
                {"status": "error", "error": "Connection failed"}
            )
        else:
            status["components"]["database"] = {"status": "error", "error": "DATABASE_URL not configured"}

        status["components"]["contacts_api"] = (
            {"status": "available", "list_ids": coordinator.contacts.list_ids}
            if coordinator.contacts.is_configured else
            {"status": "unavailable", "error": "BREVO_API_KEY not configured"}
        )

    all_healthy = all(
        c.get("status") in ["healthy", "available"]
        for c in status["components"].values()
    )
    status["overall_status"] = "healthy" if all_healthy else "degraded"

    return status


@router.get("/quick")
def quick_health():
    """Quick health check for load balancers."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
