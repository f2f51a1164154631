from __future__ import annotations

from rest_framework import serializers

from savetrack_core.io.state_store import coerce_state_payload

from .models import SINGLETON_ID, BalanceRecord


class BalanceStateWriteSerializer(serializers.Serializer):
    """
    Accepts anything: balances that are not numbers become 0 and a
    non-string watermark becomes null, instead of rejecting the write.
    """

    def to_internal_value(self, data):
        clean = coerce_state_payload(data)
        clean.pop("updated_at")
        return clean

    def create(self, validated_data):
        record, _ = BalanceRecord.objects.update_or_create(pk=SINGLETON_ID, defaults=validated_data)
        return record


class BalanceRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = BalanceRecord
        fields = [
            "current_longterm",
            "current_buffer",
            "last_rollover_ym",
            "updated_at",
        ]
