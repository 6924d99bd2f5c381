"""
Admission webhook HTTP surface
POST /           AdmissionReview for ingress CREATE/UPDATE
GET  /status.html  liveness, always OK
GET  /readyz       200 once the domain claim index is synced
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .engine import AdmissionDecisionEngine, Verdict
from .review import AdmissionRequest, AdmissionResponse, AdmissionReview, Status

logger = logging.getLogger(__name__)


def build_review(review: AdmissionReview, verdict: Verdict) -> AdmissionReview:
    """Attach the verdict to the review the API server sent"""
    request = review.request or AdmissionRequest()
    logger.info(f"Responding Allowed: {verdict.allowed} for {request.operation} on Ingress: "
                f"{request.namespace}/{request.name} by user: {request.user_info.username}")
    if not verdict.allowed:
        logger.error(f"Rejection reason: {verdict.reason}")

    status = Status(code=200) if verdict.allowed else Status(code=403, message=verdict.reason,
                                                             reason='Forbidden')
    return AdmissionReview(
        apiVersion=review.api_version,
        kind=review.kind,
        response=AdmissionResponse(uid=request.uid, allowed=verdict.allowed, status=status),
    )


def create_app(engine: AdmissionDecisionEngine) -> FastAPI:
    app = FastAPI(title="Ingress Claim Webhook", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.engine = engine

    async def review_handler(request: Request):
        logger.info(f"Serving {request.method} {request.url.path} request for client: "
                    f"{request.client.host if request.client else 'unknown'}")
        body = await request.body()

        try:
            review = AdmissionReview.model_validate_json(body)
            if review.request is None:
                raise ValueError("AdmissionReview carries no request")
        except (ValidationError, ValueError) as e:
            verdict = Verdict.deny(
                f"Failed to decode the request body json into an AdmissionReview resource: {e}"
            )
            return _respond(build_review(AdmissionReview(), verdict))

        logger.debug(f"Incoming AdmissionReview for resource: {review.request.resource}, "
                     f"kind: {review.request.kind}")
        verdict = await run_in_threadpool(engine.decide, review.request)
        return _respond(build_review(review, verdict))

    app.add_api_route('/', review_handler, methods=['POST'])
    app.add_api_route('/validate', review_handler, methods=['POST'])

    @app.get('/status.html', response_class=PlainTextResponse)
    def status():
        return 'OK'

    @app.get('/readyz', response_class=PlainTextResponse)
    def readyz():
        if not engine.index.ready:
            return PlainTextResponse('Domain claim index not synced', status_code=503)
        return 'OK'

    return app


def _respond(review: AdmissionReview) -> JSONResponse:
    return JSONResponse(review.model_dump(by_alias=True, exclude_none=True))
