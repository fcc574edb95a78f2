from __future__ import annotations

import logging

from invoicer.models.company import CompanyProfile
from invoicer.repositories.base import CompanyProfileRepository

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, repo: CompanyProfileRepository) -> None:
        self.repo = repo

    def get_profile(self) -> CompanyProfile | None:
        """The issuing company: the most recently created profile."""
        profiles = self.repo.list_all()
        return profiles[0] if profiles else None

    def save_profile(self, profile: CompanyProfile) -> CompanyProfile:
        CompanyProfile.model_validate(profile.model_dump())
        if profile.id:
            result = self.repo.update(profile)
            logger.info("Company profile updated: id=%s, name=%s", result.id, result.company_name)
        else:
            result = self.repo.create(profile)
            logger.info("Company profile created: id=%s, name=%s", result.id, result.company_name)
        return result

    def delete_profile(self, profile_id: str) -> None:
        self.repo.delete(profile_id)
        logger.info("Company profile %s deleted", profile_id)
