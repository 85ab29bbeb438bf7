from fastapi import APIRouter, Request, Response

api_router = APIRouter()


def build_event(request: Request, raw_body: bytes) -> dict:
    """Wrap an HTTP request in the gateway event shape the handler expects."""
    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "body": raw_body.decode("utf-8", errors="replace") if raw_body else None,
    }


@api_router.post("/feedback", status_code=201)
async def submit_feedback(request: Request):
    """
    [Feedback Handler]
    Store a feedback submission (name, email, message).

    The raw body is handed to the handler unparsed so that invalid JSON and
    missing fields produce the same responses as the Lambda entry point.
    """
    handler = request.app.state.feedback_handler
    event = build_event(request, await request.body())

    result = await handler.handle(event)

    return Response(
        content=result["body"],
        status_code=result["statusCode"],
        headers=result["headers"],
    )
