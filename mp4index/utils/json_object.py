"""
Type hint for a JSON object
"""

from typing import Any, TypeAlias

JsonObject: TypeAlias = dict[str, Any]
JsonArray: TypeAlias = list[JsonObject]
