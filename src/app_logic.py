import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Coroutine, Dict, List, Mapping, MutableMapping, Optional

from src.utils.errors import (
    AddressNotFound,
    ProfileStoreError,
    ProfileValidationError,
    ServiceUnavailable,
    describe_error,
)
from src.utils.filtering import FilterCriteria, apply_filters
from src.utils.geocoding import GeocodingResolver
from src.utils.profiles import Profile, ProfileStore
from src.utils.validation import ensure_valid

__all__ = [
    "ProfileDirectory",
    "get_session_directory",
    "run_async",
]

logger = logging.getLogger(__name__)

SESSION_KEY = "profile_directory"


class ProfileDirectory:
    """Session state for the directory: store, filters, selection and form feedback.

    The add/edit flows validate the raw form payload, resolve the address,
    then commit to the store. Validation and geocoding failures are turned
    into form feedback or a toast and never propagate to the page.

    A form generation counter advances on every submission and form reset.
    A resolution that settles after the counter moved on belongs to a form
    the user has abandoned and is discarded.
    """

    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        resolver: Optional[GeocodingResolver] = None,
        criteria: Optional[FilterCriteria] = None,
    ):
        self.store = store if store is not None else ProfileStore()
        self.resolver = resolver if resolver is not None else GeocodingResolver(None)
        self.criteria = criteria if criteria is not None else FilterCriteria()
        self.form_errors: Optional[Dict[str, str]] = None
        self.form_message: Optional[str] = None
        self.last_error: Optional[Dict[str, str]] = None
        self.editing_profile_id: Optional[str] = None
        self._selected_id: Optional[str] = None
        self._form_generation = 0

    # --- derived state -------------------------------------------------

    @property
    def current_filtered_view(self) -> List[Profile]:
        return apply_filters(self.store.list(), self.criteria)

    @property
    def selected_profile(self) -> Optional[Profile]:
        if self._selected_id is None:
            return None
        return self.store.get(self._selected_id)

    @property
    def editing_profile(self) -> Optional[Profile]:
        return self.store.get(self.editing_profile_id) if self.editing_profile_id else None

    @property
    def form_generation(self) -> int:
        return self._form_generation

    # --- commands -------------------------------------------------------

    def set_filter_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria

    def select_profile(self, profile_id: Optional[str]) -> None:
        if profile_id is not None and profile_id not in self.store:
            logger.warning(f"Ignoring selection of unknown profile {profile_id}")
            return
        self._selected_id = profile_id

    def start_edit(self, profile_id: str) -> None:
        if profile_id not in self.store:
            logger.warning(f"Cannot edit unknown profile {profile_id}")
            return
        self.reset_form()
        self.editing_profile_id = profile_id

    def cancel_edit(self) -> None:
        self.reset_form()
        self.editing_profile_id = None

    def reset_form(self) -> None:
        self._form_generation += 1
        self._clear_form_feedback()

    def delete_profile(self, profile_id: str) -> bool:
        try:
            self.store.remove(profile_id)
        except ProfileStoreError as e:
            logger.warning(f"Delete ignored: {e}")
            return False
        if self._selected_id == profile_id:
            self._selected_id = None
        if self.editing_profile_id == profile_id:
            self.cancel_edit()
        return True

    async def add_profile(self, data: Mapping[str, Any]) -> Optional[Profile]:
        """Validate, geocode and append a new profile. Returns it, or None on failure."""
        return await self._submit(data, editing=False)

    async def edit_profile(self, data: Mapping[str, Any]) -> Optional[Profile]:
        """Validate, geocode and replace the profile with ``data["id"]``."""
        return await self._submit(data, editing=True)

    def report_error(self, error: Exception) -> None:
        title, message = describe_error(error)
        self.last_error = {"title": title, "message": message}
        logger.error(f"{title}: {message}")

    def clear_error(self) -> None:
        self.last_error = None

    # --- internals ------------------------------------------------------

    def _clear_form_feedback(self) -> None:
        self.form_errors = None
        self.form_message = None

    async def _submit(self, data: Mapping[str, Any], *, editing: bool) -> Optional[Profile]:
        self._form_generation += 1
        generation = self._form_generation
        self._clear_form_feedback()

        try:
            ensure_valid(data)
        except ProfileValidationError as e:
            self.form_errors = e.result.messages()
            self.form_message = str(e)
            logger.info(f"Profile rejected by validation: {list(self.form_errors)}")
            return None

        profile_id = None
        if editing:
            profile_id = data.get("id") or self.editing_profile_id
            if profile_id not in self.store:
                logger.warning(f"Edit ignored: profile {profile_id} not found")
                return None

        try:
            resolution = await self.resolver.resolve(data["address"])
        except AddressNotFound as e:
            if generation == self._form_generation:
                self.form_message = str(e)
            return None
        except ServiceUnavailable as e:
            self.report_error(e)
            return None
        except Exception as e:
            logger.exception(f"Unexpected error resolving address: {e}")
            self.report_error(e)
            return None

        if generation != self._form_generation:
            logger.info(f"Discarding stale resolution for form generation {generation}")
            return None

        profile = Profile.from_input(
            data, canonical_address=resolution.canonical_address, location=resolution.location
        )
        try:
            if editing:
                profile = self.store.update(replace(profile, id=profile_id))
                self.editing_profile_id = None
            else:
                profile = self.store.add(replace(profile, id=None))
        except ProfileStoreError as e:
            logger.warning(f"Commit ignored: {e}")
            return None

        # Successful commit resets the form
        self._form_generation += 1
        logger.info(f"{'Updated' if editing else 'Added'} profile {profile.id} ({profile.name})")
        return profile


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """
    Run an add/edit coroutine to completion from a Streamlit script run.

    Lookups run on a private executor that is shut down without joining, so
    a geocoding call abandoned by the resolver timeout does not hold up the
    page. The abandoned worker finishes in the background.
    """
    loop = asyncio.new_event_loop()
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="geocode")
    loop.set_default_executor(executor)
    try:
        return loop.run_until_complete(coro)
    finally:
        try:
            loop.run_until_complete(loop.shutdown_asyncgens())
        finally:
            executor.shutdown(wait=False)
            loop.close()


def get_session_directory(session_state: MutableMapping[str, Any]) -> ProfileDirectory:
    """Return the session's directory, creating it on first use.

    Args:
        session_state: ``st.session_state`` or any mutable mapping

    Returns:
        ProfileDirectory owned by that session
    """
    directory = session_state.get(SESSION_KEY)
    if directory is None:
        directory = ProfileDirectory(resolver=GeocodingResolver.from_config())
        session_state[SESSION_KEY] = directory
        logger.info("Created profile directory for new session")
    return directory
