# labflow_core/serializers.py
from __future__ import annotations

import math
from typing import Any, Dict

from rest_framework import serializers

from labflow_core.workflows import StatusChangeRequest, normalize_kind, UnknownEntityType
from labflow_core.workflows.sla_metrics import DateRange


class StatusDefinitionSerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()
    description = serializers.CharField()
    color = serializers.CharField()
    is_final = serializers.BooleanField()
    allows_editing = serializers.BooleanField(required=False)
    allows_payment = serializers.BooleanField(required=False)

    def to_representation(self, instance) -> Dict[str, Any]:
        data = super().to_representation(instance)
        # Only invoice definitions carry billing flags
        for key in ("allows_editing", "allows_payment"):
            if not hasattr(instance, key):
                data.pop(key, None)
        return data


class FiniteFloatField(serializers.FloatField):
    """
    Renders infinities as null; JSON has no representation for them.
    """

    def to_representation(self, value):
        if value is None:
            return None
        value = float(value)
        if math.isinf(value) or math.isnan(value):
            return None
        return value


class SLAStatusSerializer(serializers.Serializer):
    order_id = serializers.CharField()
    order_number = serializers.CharField(allow_null=True)
    level = serializers.CharField()
    percent_elapsed = serializers.FloatField()
    hours_remaining = FiniteFloatField(allow_null=True)
    is_completed = serializers.BooleanField()
    received_date = serializers.DateTimeField(allow_null=True)
    due_date = serializers.DateTimeField(allow_null=True)
    turnaround_days = serializers.IntegerField(allow_null=True)


class DateRangeSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        if attrs["start"] > attrs["end"]:
            raise serializers.ValidationError({"end": "End must not be before start."})
        return attrs

    def create(self, validated_data: Dict[str, Any]) -> DateRange:
        return DateRange(**validated_data)


class SLAMetricsSerializer(serializers.Serializer):
    date_range = DateRangeSerializer(allow_null=True)
    total_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
    on_track_orders = serializers.IntegerField()
    at_risk_orders = serializers.IntegerField()
    breached_orders = serializers.IntegerField()
    on_time_completion_rate = serializers.FloatField()
    average_completion_hours = serializers.FloatField()


class StatusChangeRequestSerializer(serializers.Serializer):
    entity_type = serializers.CharField()
    current_status = serializers.CharField()
    requested_status = serializers.CharField()
    actor_role = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_entity_type(self, value: str) -> str:
        try:
            return normalize_kind(value).value
        except UnknownEntityType as exc:
            raise serializers.ValidationError(str(exc))

    def create(self, validated_data: Dict[str, Any]) -> StatusChangeRequest:
        return StatusChangeRequest(
            entity_type=validated_data["entity_type"],
            current_status=validated_data["current_status"].strip().upper(),
            requested_status=validated_data["requested_status"].strip().upper(),
            actor_role=validated_data.get("actor_role"),
        )


class TransitionDecisionSerializer(serializers.Serializer):
    allowed = serializers.BooleanField()
    reason = serializers.CharField()
    allowed_targets = serializers.ListField(child=serializers.CharField())
    required_role = serializers.CharField(allow_null=True)
