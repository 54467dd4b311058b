import logging
import os
import secrets
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import sessionmaker

from boxoffice.api.routes.routes import get_session_factory
from boxoffice.application.inspection_service import InspectionService
from boxoffice.domain.exceptions import NotFoundError, StoreUnavailableError


router = APIRouter(prefix="/admin")
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))
logger = logging.getLogger(__name__)

basic_auth = HTTPBasic(auto_error=False)


def require_admin(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
) -> str:
    admin_user = os.getenv("ADMIN_USER")
    admin_pass = os.getenv("ADMIN_PASS")
    if not admin_user or not admin_pass:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin disabled",
        )

    if credentials is not None:
        user_ok = secrets.compare_digest(
            credentials.username.encode("utf-8"), admin_user.encode("utf-8")
        )
        pass_ok = secrets.compare_digest(
            credentials.password.encode("utf-8"), admin_pass.encode("utf-8")
        )
        if user_ok and pass_ok:
            return credentials.username

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Auth required",
        headers={"WWW-Authenticate": "Basic"},
    )


def get_inspection_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> InspectionService:
    return InspectionService(session_factory)


@router.get("", response_class=HTMLResponse)
def admin_index(
    request: Request,
    admin: str = Depends(require_admin),
    service: InspectionService = Depends(get_inspection_service),
):
    try:
        tables = service.table_counts()
    except StoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return templates.TemplateResponse(
        request,
        "admin_index.html",
        {"tables": tables, "admin": admin},
    )


@router.get("/{table_name}", response_class=HTMLResponse)
def admin_table(
    table_name: str,
    request: Request,
    admin: str = Depends(require_admin),
    service: InspectionService = Depends(get_inspection_service),
):
    try:
        columns, rows = service.table_rows(table_name)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    logger.info("Admin %s viewed table %s (%s rows)", admin, table_name, len(rows))
    return templates.TemplateResponse(
        request,
        "admin_table.html",
        {"title": table_name, "columns": columns, "rows": rows},
    )
