"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
from datetime import datetime, timedelta, timezone
from typing import Union


class ConvertUtils:
    # Longest suffixes first so 'ms' is not read as 'm' + 's'
    _DURATION_UNITS = {
        'MS': 0.001,
        'H': 3600,
        'M': 60,
        'S': 1,
    }

    @staticmethod
    def human_to_timedelta(duration_str: str) -> timedelta:
        """
        Convert human-readable duration string to timedelta.
        Supports formats: '15m', '90s', '1.5h', '50ms', '30' (seconds).
        Raises ValueError for negative durations or invalid formats.
        """
        duration_str = duration_str.strip().upper()
        if not duration_str:
            raise ValueError("Empty duration")

        units = ConvertUtils._DURATION_UNITS
        for unit in sorted(units.keys(), key=len, reverse=True):
            if duration_str.endswith(unit):
                value_str = duration_str[:-len(unit)].strip()
                try:
                    value = float(value_str)
                except ValueError:
                    raise ValueError(f"Invalid numeric value in duration: '{value_str}'")

                if value < 0:
                    raise ValueError(f"Negative duration not allowed: '{duration_str}'")
                return timedelta(seconds=value * units[unit])

        # No unit specified, treat as seconds
        try:
            value = float(duration_str)
        except ValueError:
            raise ValueError(
                f"Invalid duration format: '{duration_str}'. "
                f"Supported formats: 15m, 90s, 1.5h, 50ms, 30"
            )

        if value < 0:
            raise ValueError(f"Negative duration not allowed: '{duration_str}'")
        return timedelta(seconds=value)

    @staticmethod
    def timedelta_to_human(delta: timedelta) -> str:
        """
        Convert timedelta to a short human-readable string (e.g., 15m, 1h 30m, 50ms).
        """
        total = delta.total_seconds()
        if total < 0:
            return "0s"
        if total < 1:
            return f"{round(total * 1000)}ms"

        hours, rest = divmod(int(total), 3600)
        minutes, seconds = divmod(rest, 60)
        parts = []
        if hours:
            parts.append(f"{hours}h")
        if minutes:
            parts.append(f"{minutes}m")
        if seconds or not parts:
            parts.append(f"{seconds}s")
        return " ".join(parts)

    @staticmethod
    def is_valid_duration_format(duration_str: str) -> bool:
        """
        Check if the input string has a valid duration format.
        """
        try:
            ConvertUtils.human_to_timedelta(duration_str)
            return True
        except ValueError:
            return False

    @staticmethod
    def ensure_aware(value: datetime) -> datetime:
        """
        Return a timezone-aware datetime. Naive values are taken as UTC.
        """
        if not isinstance(value, datetime):
            raise ValueError(f"Expected datetime, got {type(value).__name__}")
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @staticmethod
    def parse_timestamp(value: Union[str, datetime, int, float]) -> datetime:
        """
        Parse an ISO 8601 string (trailing 'Z' allowed), a datetime or a Unix
        timestamp into a timezone-aware datetime.
        """
        if isinstance(value, datetime):
            return ConvertUtils.ensure_aware(value)
        if isinstance(value, bool):
            raise ValueError(f"Invalid timestamp: {value!r}")
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)

        text = str(value).strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid timestamp format: '{value}'")
        return ConvertUtils.ensure_aware(parsed)

    @staticmethod
    def timestamp_to_human(value: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Convert a datetime to a human-readable string in local time.
        """
        try:
            return ConvertUtils.ensure_aware(value).astimezone().strftime(fmt)
        except (ValueError, OverflowError, OSError):
            return "Invalid timestamp"
