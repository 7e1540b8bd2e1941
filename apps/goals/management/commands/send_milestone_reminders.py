from django.conf import settings
from django.core.management.base import BaseCommand

from apps.goals.adapters.email_notifier import EmailNotifier
from apps.goals.adapters.orm_repositories import DjangoGoalRepository, DjangoMilestoneRepository
from apps.goals.application.notifications import NotificationService
from ._recipients import recipients_with


class Command(BaseCommand):
    help = 'Wysyła przypomnienia o kamieniach milowych z terminem w najbliższych dniach (uruchamiane z crona)'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=settings.GOALS_REMINDER_DAYS,
                            help='Okno terminów w dniach')

    def handle(self, *args, **options):
        service = NotificationService(DjangoGoalRepository(), DjangoMilestoneRepository(), EmailNotifier())
        sent = service.send_milestone_reminders(recipients_with('milestone_reminders'), days=options['days'])

        self.stdout.write(self.style.SUCCESS(f'Wysłano {sent} przypomnień o kamieniach milowych.'))
