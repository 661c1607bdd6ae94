"""Document filters deciding which documents apply under a profile."""
from typing import Callable

from src.config_resolver.config.documents import Document
from src.config_resolver.config.profiles import NamedProfile, Profile


DocumentFilter = Callable[[Document], bool]
DocumentFilterFactory = Callable[[Profile], DocumentFilter]


class ProfileFilter:
    """Builds positive and negative document filters.

    Both delegate profile expression evaluation to the environment's
    accepts_profiles predicate, so '!prod' or 'eu & prod' behave the same
    way everywhere.
    """

    def __init__(self, environment):
        self.environment = environment

    def positive(self, profile: Profile) -> DocumentFilter:
        """Matches documents that belong to exactly this profile pass.

        With no profile: documents that declare no profiles.
        With a named profile: documents declaring that profile whose
        declared expression the environment accepts.
        """
        def match(document: Document) -> bool:
            if not isinstance(profile, NamedProfile):
                return not document.declared_profiles
            return (
                profile.name in document.declared_profiles
                and self.environment.accepts_profiles(*document.declared_profiles)
            )

        return match

    def negative(self, profile: Profile) -> DocumentFilter:
        """Matches profile restricted documents found in unscoped files.

        Only applies to the final no-profile pass.
        """
        def match(document: Document) -> bool:
            return (
                not isinstance(profile, NamedProfile)
                and bool(document.declared_profiles)
                and self.environment.accepts_profiles(*document.declared_profiles)
            )

        return match
