from typing import Any

from cutover.models.organization import Agency, Member
from cutover.repositories.base import RoutedRepository, Store, as_changes, new_id
from cutover.translators.organization_translator import agency_translator, company_translator


class AgencyRepository(RoutedRepository):
    family = "agencies"
    stores = (Store(Agency, "agencies", agency_translator),)
    legacy_tables = ("agencies",)
    unique_keys = ("slug",)


class CompanyRepository(RoutedRepository):
    family = "companies"
    stores = (Store(Member, "companies", company_translator),)
    legacy_tables = ("members",)
    unique_keys = ("slug",)

    async def create(self, data: Any):
        values = as_changes(data, exclude_unset=False)
        values["id"] = values.get("id") or new_id()
        values["slug"] = values.get("slug") or f"company-{values['id']}"
        return await super().create(values)
