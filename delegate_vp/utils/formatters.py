"""Shared formatting and file utilities for commands."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from rich.console import Console

# Shared console instance
console = Console()


def format_units(value: int, decimals: int) -> str:
    """
    Format a fixed-point integer as an exact decimal string.

    Trailing fractional zeros are trimmed.

    Examples (18 decimals):
        1_000_000_000_000_000_000 -> "1"
        1_500_000_000_000_000_000 -> "1.5"
    """
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")
    factor = 10**decimals
    whole, fractional = divmod(value, factor)
    if fractional == 0:
        return str(whole)
    fractional_str = str(fractional).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{fractional_str}"


def format_units_human(value: int, decimals: int, precision: int = 2) -> str:
    """
    Format a fixed-point integer for display.

    The whole part gets thousands separators and the fraction is truncated
    (not rounded) to ``precision`` digits. Non-zero amounts too small to show
    render as "<0.01" rather than "0".

    Examples (18 decimals):
        1_234_567_891_000_000_000_000_000 -> "1,234,567.89"
        1_000_000_000_000_000 -> "<0.01"
    """
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")
    factor = 10**decimals
    whole, fractional = divmod(value, factor)

    shown = 0
    if precision > 0 and decimals > 0:
        shown = fractional * 10**precision // factor

    if whole == 0 and shown == 0 and value > 0:
        return "<" + format_units(1, precision) if precision else "<1"

    text = f"{whole:,}"
    if shown:
        text += "." + str(shown).rjust(precision, "0").rstrip("0")
    return text


def save_json_output(
    data: Dict[str, Any],
    filename: str,
    output_dir: str = "output",
    print_path: bool = True,
) -> str:
    """
    Save data to a JSON file with automatic directory creation.

    Args:
        data: Data to save
        filename: Output filename (can include subdirectories)
        output_dir: Base output directory (default: 'output')
        print_path: Whether to print the saved file path

    Returns:
        Full path to saved file
    """
    filepath = Path(output_dir) / filename
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)

    if print_path:
        console.print(f"[cyan]Data saved to:[/cyan] {filepath}")

    return str(filepath)


def generate_timestamped_filename(prefix: str, extension: str = "json") -> str:
    """
    Generate a filename with timestamp.

    Args:
        prefix: Filename prefix
        extension: File extension (without dot)

    Returns:
        Filename like "prefix_20240315_123456.json"
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{extension}"
