"""Resource provenance: slides and videos must not depend on the scraped platform."""

from typing import Iterable

from talk_migration.extractors.platforms import NOTIST_POLICY, SourcePolicy
from talk_migration.models.results import ValidationResult
from talk_migration.models.talk import Resource


class ResourceProvenanceValidator:
    """Slides must sit on storage, videos on a video platform (or the embed host)."""

    def __init__(self, policy: SourcePolicy = NOTIST_POLICY):
        self.policy = policy

    def validate(self, resources: Iterable[Resource]) -> ValidationResult:
        """Check slides are on storage and videos on a video platform.

        Stops at the first violation. Links and code resources are unrestricted:
        linking to not-yet-migrated talks on the source platform is fine.
        """
        for index, resource in enumerate(resources, 1):
            label = f"Resource {index} '{resource.title}'"

            if resource.type == "slides":
                if self.policy.is_storage(resource.url):
                    continue
                if self.policy.is_scraped_platform(resource.url):
                    return ValidationResult.failure(
                        f"SLIDES FROM SOURCE PLATFORM: {label} still points at {resource.url}. "
                        f"Slides must be re-uploaded to storage."
                    )
                return ValidationResult.failure(
                    f"INVALID SLIDES SOURCE: {label} is not hosted on storage: {resource.url}"
                )

            if resource.type == "video":
                if self.policy.is_video_platform(resource.url) or self.policy.is_embed(resource.url):
                    continue
                if self.policy.is_scraped_platform(resource.url):
                    return ValidationResult.failure(
                        f"VIDEO FROM SOURCE PLATFORM: {label} still points at {resource.url}. "
                        f"Videos must come from a video platform."
                    )
                return ValidationResult.failure(
                    f"INVALID VIDEO SOURCE: {label} is not on an accepted video platform: {resource.url}"
                )

        return ValidationResult.success()
