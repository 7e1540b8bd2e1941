from django.core.management.base import BaseCommand

from apps.goals.adapters.email_notifier import EmailNotifier
from apps.goals.adapters.orm_repositories import DjangoGoalRepository, DjangoMilestoneRepository
from apps.goals.application.notifications import NotificationService
from ._recipients import recipients_with


class Command(BaseCommand):
    help = 'Wysyła cotygodniowe podsumowanie postępów (uruchamiane z crona w poniedziałek)'

    def handle(self, *args, **options):
        service = NotificationService(DjangoGoalRepository(), DjangoMilestoneRepository(), EmailNotifier())
        sent = service.send_weekly_digests(recipients_with('weekly_digest'))

        self.stdout.write(self.style.SUCCESS(f'Wysłano {sent} podsumowań tygodniowych.'))
