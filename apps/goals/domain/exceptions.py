# apps/goals/domain/exceptions.py
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError


class NotFound(ObjectDoesNotExist):
    """Cel, kamień milowy lub wpis nie istnieje."""


class Forbidden(PermissionDenied):
    """Obiekt istnieje, ale należy do innego użytkownika."""


class ValidationFailed(ValidationError):
    """Żądanie odrzucone przed jakąkolwiek zmianą stanu."""


class InvariantViolation(AssertionError):
    """Błąd implementacji: wyliczony stan celu łamie niezmiennik."""
