# app/system_services/template_repository.py
from typing import List

from sqlalchemy import select

from app.system_models.template_model.template_model import Template
from app.system_services.base_repository import BaseRepository


class TemplateRepository(BaseRepository[Template]):
    model = Template

    async def list_all(self) -> List[Template]:
        result = await self.db.execute(
            select(Template).order_by(Template.category.asc(), Template.name.asc())
        )
        return list(result.scalars().all())

    async def delete(self, template: Template) -> None:
        await self.db.delete(template)
        await self.db.flush()
