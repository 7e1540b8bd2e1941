from typing import List

from django.contrib.auth.models import User

from apps.goals.ports.notifier import Recipient


def recipients_with(preference: str) -> List[Recipient]:
    """Aktywni użytkownicy z włączoną preferencją powiadomień w profilu."""
    users = User.objects.filter(is_active=True, **{f'profile__{preference}': True}).exclude(email='')
    return [
        Recipient(user_id=u.id, email=u.email, name=u.get_full_name() or u.username)
        for u in users.order_by('id')
    ]
