from django.db import models


SINGLETON_ID = 1


class BalanceRecord(models.Model):
    """The one persisted balance record; every write replaces it."""

    current_longterm = models.FloatField(default=0.0)
    current_buffer = models.FloatField(default=0.0)
    last_rollover_ym = models.TextField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    @classmethod
    def current(cls):
        return cls.objects.filter(pk=SINGLETON_ID).first()
