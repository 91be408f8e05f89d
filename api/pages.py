from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from config.config import settings

router = APIRouter(include_in_schema=False)

PAGE_TITLE = "Script Generation"

LANDING_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
    <link rel="stylesheet" href="/assets/application.css">
  </head>
  <body>
    <div id="react-root" data-api-docs="{docs_url}"></div>
    <script type="module" src="/assets/application.js"></script>
  </body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def landing_page() -> HTMLResponse:
    """Shell page the front-end application mounts into."""
    return HTMLResponse(
        LANDING_PAGE.format(title=PAGE_TITLE, docs_url=settings.api_docs.docs_url)
    )
