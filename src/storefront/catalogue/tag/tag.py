"""Tag aggregate and its creation command."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.shared.queries import fetch_all


@storefront.aggregate
class Tag:
    name = String(required=True, max_length=50, unique=True)


@storefront.repository(part_of=Tag)
class TagRepository:
    def find_by_name(self, name: str):
        return self._dao.query.filter(name=name).all().first

    def everything(self) -> list:
        return fetch_all(self._dao.query.order_by("name"))

    def names_by_id(self) -> dict[str, str]:
        return {str(tag.id): tag.name for tag in self.everything()}


@storefront.command(part_of="Tag")
class CreateTag:
    name = String(required=True, max_length=50)


@storefront.command_handler(part_of=Tag)
class CreateTagHandler:
    @handle(CreateTag)
    def create_tag(self, command):
        repo = current_domain.repository_for(Tag)
        name = command.name.strip()
        if repo.find_by_name(name) is not None:
            raise ValidationError({"name": [f"Tag '{name}' already exists"]})

        tag = Tag(name=name)
        repo.add(tag)
        return str(tag.id)
