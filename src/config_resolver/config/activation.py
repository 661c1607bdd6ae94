"""Profile work queue: activation, inclusion and the final active profile set."""
import logging
from collections import deque
from typing import Deque, Iterable, List, Optional, Set

from src.config_resolver.config.binder import PropertyBinder
from src.config_resolver.config.diagnostics import DiagnosticsSink
from src.config_resolver.config.documents import (
    ACTIVE_PROFILES_PROPERTY,
    INCLUDE_PROFILES_PROPERTY,
    bind_profiles,
)
from src.config_resolver.config.profiles import NO_PROFILE, NamedProfile, Profile
from src.config_resolver.config.property_source import PropertySource
from src.config_resolver.config.substitutor import PlaceholderResolver


logger = logging.getLogger(__name__)


class ProfileActivationEngine:
    """Owns the profile worklist for one resolution run.

    Profiles move Unqueued -> Queued -> Processing -> Processed, and a
    profile is processed at most once. Documents may activate or include
    further profiles while the queue drains; the run ends when the queue
    is empty.

    Queue order after initialize():
    1. the no-profile marker (lowest precedence)
    2. profiles already active on the environment that did not come from
       'profiles.active' / 'profiles.include'
    3. 'profiles.include' profiles
    4. 'profiles.active' profiles (via activate())
    5. only if nothing above was named: the environment's default profiles
    """

    def __init__(self, environment, diagnostics: Optional[DiagnosticsSink] = None):
        self.environment = environment
        self.diagnostics = diagnostics or DiagnosticsSink()
        self.queue: Deque[Profile] = deque()
        self.processed: List[Profile] = []
        self._processed_set: Set[Profile] = set()
        self.activated = False

    def initialize(self) -> None:
        self.queue.append(NO_PROFILE)
        activated_via_property = self._profiles_from_property(ACTIVE_PROFILES_PROPERTY)
        included_via_property = self._profiles_from_property(INCLUDE_PROFILES_PROPERTY)
        other_active = [
            NamedProfile(name)
            for name in self.environment.active_profiles
            if NamedProfile(name) not in activated_via_property
            and NamedProfile(name) not in included_via_property
        ]
        self._enqueue(other_active)
        # Pre-existing active profiles (e.g. from system properties) take
        # precedence over those added in config files
        self._enqueue(included_via_property)
        self.activate(activated_via_property)
        if len(self.queue) == 1:
            self._enqueue(NamedProfile(name, is_default=True) for name in self.environment.default_profiles)

        logger.debug(
            "Profile queue initialized",
            extra={"queue": [str(p) for p in self.queue]},
        )

    def _profiles_from_property(self, property_name: str) -> List[NamedProfile]:
        if not self.environment.contains_property(property_name):
            return []
        return list(bind_profiles(PropertyBinder.get(self.environment), property_name))

    def _enqueue(self, profiles: Iterable[Profile]) -> None:
        for profile in profiles:
            if profile not in self._processed_set and profile not in self.queue:
                self.queue.append(profile)

    # ==================== Transitions ====================

    def activate(self, profiles: Iterable[NamedProfile]) -> None:
        """Queue explicitly activated profiles.

        Only the first non-empty activation takes effect; later ones are
        logged and ignored. Activation drops queued default profiles.
        """
        profiles = list(profiles)
        if not profiles:
            return
        names = ", ".join(str(p) for p in profiles)
        if self.activated:
            self.diagnostics.debug(
                f"Profiles already activated, '[{names}]' will not be applied",
                profiles=[str(p) for p in profiles],
            )
            return
        # Remove defaults before queueing so a same-named activated profile survives
        self._remove_unprocessed_default_profiles()
        self._enqueue(NamedProfile(p.name) for p in profiles)
        self.diagnostics.debug(f"Activated activeProfiles {names}", profiles=[str(p) for p in profiles])
        self.activated = True

    def include(self, profiles: Iterable[NamedProfile]) -> None:
        """Put included profiles at the front of the remaining queue.

        Already processed profiles are never re-queued.
        """
        included = [p for p in dict.fromkeys(profiles) if p not in self._processed_set]
        if not included:
            return
        existing = [p for p in self.queue if p not in included]
        self.queue.clear()
        self.queue.extend(included)
        self.queue.extend(existing)
        self.diagnostics.debug(
            f"Included profiles {', '.join(str(p) for p in included)}",
            profiles=[str(p) for p in included],
        )

    def _remove_unprocessed_default_profiles(self) -> None:
        remaining = [p for p in self.queue if not (isinstance(p, NamedProfile) and p.is_default)]
        self.queue.clear()
        self.queue.extend(remaining)

    def next_profile(self) -> Optional[Profile]:
        """Pop the next unprocessed profile, or None when the queue is drained."""
        while self.queue:
            profile = self.queue.popleft()
            if profile not in self._processed_set:
                return profile
        return None

    def begin(self, profile: Profile) -> None:
        """Mark a profile as being processed.

        Explicitly requested profiles become active on the environment so
        profile expressions in documents can see them.
        """
        if isinstance(profile, NamedProfile) and not profile.is_default:
            if profile.name not in self.environment.active_profiles:
                self.environment.add_active_profile(profile.name)

    def mark_processed(self, profile: Profile) -> None:
        if profile not in self._processed_set:
            self._processed_set.add(profile)
            self.processed.append(profile)

    @property
    def processed_named_profiles(self) -> List[NamedProfile]:
        return [p for p in self.processed if isinstance(p, NamedProfile)]

    # ==================== Finalization ====================

    def apply_active_profiles(self, default_properties: Optional[PropertySource]) -> List[str]:
        """Write the final active profile list back to the environment.

        The list is 'profiles.include' from the default properties, then
        'profiles.active' from the default properties if nothing was
        activated explicitly, then every processed non-default profile.
        """
        active: List[str] = []
        if default_properties is not None:
            binder = PropertyBinder(
                [default_properties],
                PlaceholderResolver(self.environment.get_raw_property),
            )
            active.extend(binder.bind(INCLUDE_PROFILES_PROPERTY, list).or_else([]))
            if not self.activated:
                active.extend(binder.bind(ACTIVE_PROFILES_PROPERTY, list).or_else([]))
        active.extend(p.name for p in self.processed_named_profiles if not p.is_default)
        active = list(dict.fromkeys(str(name) for name in active))
        self.environment.set_active_profiles(active)
        logger.info(
            f"Active profiles: {active}",
            extra={"active_profiles": active, "processed": [str(p) for p in self.processed]},
        )
        return active
