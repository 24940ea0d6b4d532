"""
Note templates API endpoints.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from notegen.services.templates import TemplateNotFoundError, template_registry

router = APIRouter(prefix="/api/templates", tags=["templates"])


class TemplateResponse(BaseModel):
    """Note template."""

    name: str
    title: str
    prompt: str
    icon: str = ""


@router.get("", response_model=list[TemplateResponse])
async def list_templates() -> list[TemplateResponse]:
    """List note templates in display order."""
    return [
        TemplateResponse(**template.to_dict())
        for template in template_registry.list_templates()
    ]


@router.get("/{name}", response_model=TemplateResponse)
async def get_template(name: str) -> TemplateResponse:
    """Get a single note template."""
    try:
        template = template_registry.get(name)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return TemplateResponse(**template.to_dict())
