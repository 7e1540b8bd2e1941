# apps/core/models.py
from django.db import models
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')

    # Preferencje powiadomień mailowych
    milestone_reminders = models.BooleanField(default=True, help_text="Przypomnienia o zbliżających się kamieniach milowych")
    weekly_digest = models.BooleanField(default=True, help_text="Cotygodniowe podsumowanie postępów")

    def __str__(self):
        return f"Profile of {self.user.username}"


# Sygnał: Twórz profil automatycznie przy tworzeniu Usera
@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        UserProfile.objects.get_or_create(user=instance)
