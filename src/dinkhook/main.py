import hmac
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from dinkhook import __version__
from dinkhook.auth import DEFAULT_TOKEN_TTL, create_webhook_token, verify_webhook_token
from dinkhook.bus import DispatchWorker, EventBus
from dinkhook.config import Settings, load_settings
from dinkhook.dispatch import DispatchError, Dispatcher, Notification
from dinkhook.handlers import register_default_handlers
from dinkhook.intake import IntakeError, parse_submission
from dinkhook.store import InMemoryNotificationStore
from dinkhook.utils.logger_util import configure_logging, get_logger

logger = get_logger(__name__)

QUEUE_FULL_RETRY_AFTER = "5"
admin_security = HTTPBearer(auto_error=False)


class TokenRequest(BaseModel):
    subject: str = Field(..., min_length=1)
    ttl_sec: int = Field(DEFAULT_TOKEN_TTL, gt=0)


def create_app(settings: Optional[Settings] = None, dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    """Build the receiver.

    Without an explicit ``dispatcher`` every known type gets the built-in
    summary handler. More handlers can be added later through
    ``app.state.dispatcher``.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_dir)
    store = InMemoryNotificationStore(history_size=settings.history_size, dedup_window_seconds=settings.dedup_window_seconds)
    if dispatcher is None:
        dispatcher = register_default_handlers(Dispatcher(), store)
    bus = EventBus(default_maxsize=settings.queue_maxsize)
    worker = DispatchWorker(bus, dispatcher, store, concurrency=settings.workers)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.queued:
            worker.start()
        logger.info("receiving Dink webhooks on POST %s (%s dispatch)", settings.webhook_path, settings.dispatch_mode)
        try:
            yield
        finally:
            await worker.stop()

    app = FastAPI(title="dinkhook", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.dispatcher = dispatcher
    app.state.bus = bus
    app.state.worker = worker

    async def _receive(request: Request):
        if settings.require_token:
            token = request.query_params.get("token")
            if not token or verify_webhook_token(token, settings.token_secret) is None:
                logger.warning("rejected webhook without a valid token from %s", request.client.host if request.client else "?")
                raise HTTPException(status_code=401, detail="invalid or missing webhook token")

        try:
            submission = await parse_submission(request, settings.max_attachment_bytes)
        except IntakeError as exc:
            logger.warning("rejected webhook: %s", exc.message)
            raise HTTPException(status_code=exc.status_code, detail=exc.message)

        env = submission.envelope
        if settings.allowed_account_hashes and env.dink_account_hash not in settings.allowed_account_hashes:
            logger.warning("rejected %s from %s: account hash not allowed", env.type, env.player)
            raise HTTPException(status_code=403, detail="account not allowed")

        fingerprint = submission.fingerprint
        dup = store.find_duplicate(fingerprint)
        if dup is not None:
            return {"status": "duplicate", "id": dup.id, "type": dup.type}

        notification = Notification.from_submission(submission)
        store.add(notification, fingerprint)
        logger.info("received %s from %s (%s)", notification.type, env.player, notification.id)
        try:
            return await _dispatch(notification)
        except Exception:
            # leave no record stuck "received", or retries would be suppressed
            store.set_status(notification.id, "failed", error="internal error")
            raise

    async def _dispatch(notification: Notification):
        if settings.queued:
            store.set_status(notification.id, "queued")
            if not await bus.publish("inbox", notification):
                store.set_status(notification.id, "failed", error="inbox full")
                return JSONResponse(
                    {"status": "busy", "id": notification.id, "detail": "dispatch queue is full"},
                    status_code=503,
                    headers={"Retry-After": QUEUE_FULL_RETRY_AFTER},
                )
            return JSONResponse({"status": "queued", "id": notification.id, "type": notification.type}, status_code=202)

        try:
            result = await dispatcher.dispatch(notification)
        except DispatchError as exc:
            store.set_status(notification.id, "failed", error=str(exc))
            return JSONResponse(
                {"status": "error", "id": notification.id, "detail": "notification processing failed"},
                status_code=500,
            )
        store.set_status(notification.id, "handled" if result.handled else "unhandled")
        return {"status": "ok", "id": notification.id, "type": notification.type, "handled": result.handled}

    @app.post(settings.webhook_path)
    async def receive_webhook(request: Request):
        try:
            return await _receive(request)
        except HTTPException:
            raise
        except Exception:
            logger.exception("unexpected failure handling webhook")
            return JSONResponse({"status": "error", "detail": "internal error"}, status_code=500)

    @app.get("/health")
    async def health():
        return {"status": "ok", "dispatch_mode": settings.dispatch_mode}

    @app.get("/stats")
    async def stats():
        return {
            "store": store.stats(),
            "bus": bus.metrics(),
            "worker": {"running": worker.running, "processed": worker.processed, "failed": worker.failed},
            "handled_types": dispatcher.registered_types,
        }

    @app.get("/notifications")
    async def list_notifications(
        type: Optional[str] = None,
        player: Optional[str] = None,
        limit: int = Query(50, ge=1, le=500),
    ):
        records = store.list(event_type=type, player=player, limit=limit)
        return {"notifications": [r.to_dict(include_envelope=False) for r in records]}

    @app.get("/notifications/{notification_id}")
    async def get_notification(notification_id: str):
        rec = store.get(notification_id)
        if not rec:
            raise HTTPException(status_code=404, detail="notification not found")
        return rec.to_dict()

    @app.get("/notifications/{notification_id}/attachment")
    async def get_attachment(notification_id: str):
        rec = store.get(notification_id)
        if not rec or rec.attachment is None:
            raise HTTPException(status_code=404, detail="attachment not found")
        return Response(content=rec.attachment.data, media_type=rec.attachment.content_type or "application/octet-stream")

    def require_admin(credentials: Optional[HTTPAuthorizationCredentials] = Depends(admin_security)):
        if not settings.admin_key:
            raise HTTPException(status_code=404, detail="Not Found")
        if credentials is None or not hmac.compare_digest(credentials.credentials.encode(), settings.admin_key.encode()):
            raise HTTPException(status_code=401, detail="invalid admin key", headers={"WWW-Authenticate": "Bearer"})

    @app.post("/admin/tokens", dependencies=[Depends(require_admin)])
    async def admin_issue_token(req: TokenRequest):
        token = create_webhook_token(req.subject, ttl_sec=req.ttl_sec, secret=settings.token_secret)
        return {"subject": req.subject, "token": token, "webhook_path": f"{settings.webhook_path}?token={token}"}

    return app


def run():
    """Serve with settings from the environment; for uvicorn directly use ``uvicorn --factory dinkhook.main:create_app``."""
    settings = load_settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
