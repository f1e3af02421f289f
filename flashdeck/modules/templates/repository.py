"""Read access to card templates."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashdeck.shared.errors import safe

from .exceptions import TemplateNotFoundError
from .models import CardTemplate
from .schema import TemplateSchema

logger = logging.getLogger(__name__)


class TemplateRepository:
    """Loads templates as engine-ready schemas."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @safe
    async def get(self, template_id: UUID) -> CardTemplate | None:
        stmt = (
            select(CardTemplate)
            .options(selectinload(CardTemplate.fields))
            .where(CardTemplate.id == template_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_schema(self, template_id: UUID) -> TemplateSchema:
        """Load a template and convert it to a ``TemplateSchema``.

        Raises:
            TemplateNotFoundError: No template with this id.
        """
        template = await self.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)

        schema = template.to_schema()
        logger.debug(
            "Loaded template %s with %d fields",
            template_id,
            len(schema),
            extra={"template_id": str(template_id)},
        )
        return schema
