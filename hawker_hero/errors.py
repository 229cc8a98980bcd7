"""Error taxonomy shared by the services and the request handlers.

Services raise these; views catch the ones they can recover from locally
(validation, conflicts) and leave the rest to the app-level handlers in
:mod:`hawker_hero.app`.
"""

UNAVAILABLE = "That item is unavailable or you do not have access to it."


class HawkerHeroError(Exception):
    message = "Something went wrong. Please try again."

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(HawkerHeroError):
    """One or more submitted fields are missing or malformed.

    ``errors`` maps a field name to a user-facing message.
    """

    message = "Please correct the highlighted fields."

    def __init__(self, errors, message=None):
        if isinstance(errors, str):
            errors = {"form": errors}
        self.errors = dict(errors)
        if message is None and len(self.errors) == 1:
            message = next(iter(self.errors.values()))
        super().__init__(message)


class InvalidCredentials(HawkerHeroError):
    message = "Invalid email or password."


class NotAuthenticated(HawkerHeroError):
    message = "Please log in to view this resource."


class NotAuthorized(HawkerHeroError):
    message = UNAVAILABLE


class NotFound(HawkerHeroError):
    message = UNAVAILABLE


class Conflict(HawkerHeroError):
    message = "Username or email already exists."


class DataAccessFailure(HawkerHeroError):
    message = "We could not complete your request. Please try again."
