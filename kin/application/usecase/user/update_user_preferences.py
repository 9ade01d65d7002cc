"""Update user preferences use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_value
from kin.application.usecase.views import UserView
from kin.domain.service import UserService
from kin.domain.value import SUPPORTED_LANGUAGES, Language, UserId


class UpdateUserPreferencesRequest(BaseModel):
    """Update user preferences request.

    Fields left as None are not changed.
    """

    user_id: str  # From authenticated user
    preferred_language: str | None = None


class UpdateUserPreferencesUseCase(BaseUseCase):
    """Use case for updating the user's preferences.

    Changes are merged into the stored preferences; unknown keys already
    there are kept.
    """

    def __init__(self, user_service: UserService) -> None:
        """Initialize update user preferences use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: UpdateUserPreferencesRequest) -> UserView:
        """Execute preferences update.

        Raises:
            ValidationError: If the language is not supported
        """
        user_id = UserId(parse_caller_id(request.user_id))

        changes = {}
        if request.preferred_language is not None:
            changes["preferred_language"] = parse_value(
                Language,
                request.preferred_language,
                "Unsupported language. Supported: " + ", ".join(SUPPORTED_LANGUAGES),
            ).root

        with logfire.span("update_user_preferences.execute", user_id=str(user_id)):
            user = await self.user_service.get_active(user_id)
            if changes:
                user = await self.user_service.update(
                    user, preferences={**user.preferences, **changes}
                )
                logfire.info("Preferences updated", keys=sorted(changes))
            return UserView.from_user(user)
