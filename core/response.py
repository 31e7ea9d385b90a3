"""
Standardized API response helpers for consistent data structure
"""
from typing import Any, Dict, Optional
from datetime import datetime


def message_response(message: str, **data: Any) -> Dict[str, Any]:
    """Create a mutation acknowledgement carrying the affected record(s)"""
    return {"message": message, **data}


def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create an error response"""
    return {
        "success": False,
        "message": message,
        "error_code": error_code,
        "details": details,
        "timestamp": datetime.utcnow().isoformat()
    }
