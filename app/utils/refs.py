"""
Public reference numbers for records shown to users (TXN…, BK-…, CMPT-…, LOG-…)
"""
import uuid


def new_ref(prefix: str, sep: str = "-") -> str:
    """
    Example:
        >>> new_ref("BK")       # 'BK-3F9A1C07D2'
        >>> new_ref("TXN", "")  # 'TXN5B0E44A19C'
    """
    return f"{prefix}{sep}{uuid.uuid4().hex[:10].upper()}"
