"""
File and timestamp utility functions for the blog publisher.
Common operations shared by storage backends and HTTP handlers.
"""
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M"


def load_json_file(filepath: str, default: Dict[str, Any]) -> Dict[str, Any]:
    """
    Load a JSON file with a default fallback.

    Args:
        filepath: Path to the JSON file
        default: Default value if file doesn't exist

    Returns:
        Loaded JSON data or default value
    """
    if os.path.exists(filepath):
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    return default


def save_json_file(filepath: str, data: Dict[str, Any], ensure_dir: bool = True) -> None:
    """
    Save data to a JSON file.

    Args:
        filepath: Path to save the JSON file
        data: Data to save
        ensure_dir: Whether to create parent directory if it doesn't exist
    """
    if ensure_dir:
        os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def to_utc_timestamp(moment: datetime) -> str:
    """Format a datetime as an ISO timestamp with a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def get_utc_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        ISO formatted timestamp string without +00:00 suffix
    """
    return to_utc_timestamp(datetime.now(timezone.utc))


def format_backup_timestamp(moment: datetime) -> str:
    """
    Format a datetime as a minute-granularity backup timestamp.

    Args:
        moment: Datetime to format (converted to UTC)

    Returns:
        Timestamp string such as "2024-11-08-14-30"
    """
    return moment.astimezone(timezone.utc).strftime(BACKUP_TIMESTAMP_FORMAT)


def parse_backup_timestamp(timestamp: str) -> Optional[int]:
    """
    Parse a backup timestamp into epoch seconds.

    Args:
        timestamp: Timestamp string in YYYY-MM-DD-HH-MM form

    Returns:
        Epoch seconds, or None if the string is not a valid timestamp
    """
    try:
        parsed = datetime.strptime(timestamp, BACKUP_TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        return None
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def sanitize_log_input(value: str) -> str:
    """
    Sanitize user input for logging to prevent log injection attacks.
    Removes newlines and other control characters that could be used for log forging.

    Args:
        value: The user input to sanitize

    Returns:
        Sanitized string safe for logging
    """
    if not isinstance(value, str):
        value = str(value)
    sanitized = value.replace('\n', '_').replace('\r', '_').replace('\t', '_')
    return sanitized[:200]
