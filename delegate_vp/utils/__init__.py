from delegate_vp.utils.blockchain import redact_rpc_url, unique_preserve_order
from delegate_vp.utils.formatters import format_units, format_units_human

__all__ = [
    "format_units",
    "format_units_human",
    "redact_rpc_url",
    "unique_preserve_order",
]
