from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, RedirectResponse

router = APIRouter()


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    """
    Returns robots.txt content to prevent web crawlers from indexing the API.
    """
    return "User-agent: *\nDisallow: /"


@router.get("/healthcheck")
def healthcheck():
    return {"status": "ok"}


@router.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")
