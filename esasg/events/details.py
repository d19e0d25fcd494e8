"""Detail payloads of the CloudWatch events this package understands."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from esasg.events.registry import register_detail_type

_RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def _parse_time(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; a missing value gives None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"time must be a string, not {type(value).__name__}")
    match = _RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {value!r}")
    date, clock, fraction, zone = match.groups()
    micros = (fraction or "")[:6].ljust(6, "0")
    if zone.upper() == "Z":
        zone = "+00:00"
    return datetime.fromisoformat(f"{date}T{clock}.{micros}{zone}")


def _object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string")
    return value


@dataclass(frozen=True)
class AZSubnet:
    """Availability zone and subnet nested in AutoScaling event details."""

    availability_zone: str = ""
    subnet_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "AZSubnet":
        data = _object(data, "Details")
        return cls(
            availability_zone=_str(data, "Availability Zone"),
            subnet_id=_str(data, "Subnet ID"),
        )


def _az_subnet(data: dict) -> AZSubnet:
    details = data.get("Details")
    return AZSubnet() if details is None else AZSubnet.from_dict(details)


@dataclass(frozen=True)
class AutoScalingLifecycleTerminateSuccessful:
    """EC2 Auto Scaling successfully terminated an instance."""

    status_code: str = ""
    description: str = ""
    auto_scaling_group_name: str = ""
    activity_id: str = ""
    details: AZSubnet = field(default_factory=AZSubnet)
    request_id: str = ""
    status_message: str = ""
    end_time: Optional[datetime] = None
    ec2_instance_id: str = ""
    start_time: Optional[datetime] = None
    cause: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "AutoScalingLifecycleTerminateSuccessful":
        data = _object(data, "detail")
        return cls(
            status_code=_str(data, "StatusCode"),
            description=_str(data, "Description"),
            auto_scaling_group_name=_str(data, "AutoScalingGroupName"),
            activity_id=_str(data, "ActivityId"),
            details=_az_subnet(data),
            request_id=_str(data, "RequestId"),
            status_message=_str(data, "StatusMessage"),
            end_time=_parse_time(data.get("EndTime")),
            ec2_instance_id=_str(data, "EC2InstanceId"),
            start_time=_parse_time(data.get("StartTime")),
            cause=_str(data, "Cause"),
        )


@dataclass(frozen=True)
class AutoScalingLifecycleTerminateUnsuccessful:
    """EC2 Auto Scaling failed to terminate an instance."""

    status_code: str = ""
    auto_scaling_group_name: str = ""
    activity_id: str = ""
    details: AZSubnet = field(default_factory=AZSubnet)
    request_id: str = ""
    status_message: str = ""
    end_time: Optional[datetime] = None
    ec2_instance_id: str = ""
    start_time: Optional[datetime] = None
    cause: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "AutoScalingLifecycleTerminateUnsuccessful":
        data = _object(data, "detail")
        return cls(
            status_code=_str(data, "StatusCode"),
            auto_scaling_group_name=_str(data, "AutoScalingGroupName"),
            activity_id=_str(data, "ActivityId"),
            details=_az_subnet(data),
            request_id=_str(data, "RequestId"),
            status_message=_str(data, "StatusMessage"),
            end_time=_parse_time(data.get("EndTime")),
            ec2_instance_id=_str(data, "EC2InstanceId"),
            start_time=_parse_time(data.get("StartTime")),
            cause=_str(data, "Cause"),
        )


@dataclass(frozen=True)
class EC2SpotInterruption:
    """Warning sent two minutes before a spot instance is interrupted."""

    instance_id: str = ""
    # One of "hibernate", "stop", "terminate".
    instance_action: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "EC2SpotInterruption":
        data = _object(data, "detail")
        return cls(
            instance_id=_str(data, "instance-id"),
            instance_action=_str(data, "instance-action"),
        )


@dataclass(frozen=True)
class EC2SpotNotification:
    """Recommendation to rebalance away from a spot instance at risk."""

    instance_id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "EC2SpotNotification":
        data = _object(data, "detail")
        return cls(instance_id=_str(data, "instance-id"))


register_detail_type(
    "aws.autoscaling",
    "EC2 Instance Terminate Successful",
    AutoScalingLifecycleTerminateSuccessful.from_dict,
)
register_detail_type(
    "aws.autoscaling",
    "EC2 Instance Terminate Unsuccessful",
    AutoScalingLifecycleTerminateUnsuccessful.from_dict,
)
register_detail_type(
    "aws.ec2",
    "EC2 Spot Instance Interruption Warning",
    EC2SpotInterruption.from_dict,
)
register_detail_type(
    "aws.ec2",
    "EC2 Instance Rebalance Recommendation",
    EC2SpotNotification.from_dict,
)