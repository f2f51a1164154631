from __future__ import annotations

import logging

from celery import shared_task
from django.conf import settings
from django.db import transaction

from savetrack_core.domain.yearmonth import current_year_month
from savetrack_core.io.plan import load_plan
from savetrack_core.io.state_store import state_from_payload
from savetrack_core.services.rollover import apply_rollover

from .models import SINGLETON_ID, BalanceRecord
from .serializers import BalanceRecordSerializer


logger = logging.getLogger(__name__)


@shared_task
def catch_up_balances():
    """
    Server-side rollover: applies elapsed months to the stored record.
    Does nothing until a client has seeded the record.
    """
    plan_path = getattr(settings, "SAVETRACK_PLAN_PATH", None)
    if not plan_path:
        return None
    plan = load_plan(plan_path)

    with transaction.atomic():
        record = BalanceRecord.objects.select_for_update().filter(pk=SINGLETON_ID).first()
        if record is None:
            return None
        state = state_from_payload(BalanceRecordSerializer(record).data)
        if state is None:
            return None

        state, changed = apply_rollover(state, plan.stages, current_year_month())
        if changed:
            record.current_longterm = state.current_longterm
            record.current_buffer = state.current_buffer
            record.last_rollover_ym = state.last_rollover_ym
            record.save(update_fields=["current_longterm", "current_buffer", "last_rollover_ym", "updated_at"])
            logger.info("Balances rolled forward to %s", state.last_rollover_ym)

    return {"changed": changed, **state.to_payload()}
