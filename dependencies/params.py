import re

from errors import InvalidParameter
from serializers.common import MAX_ID

_ID_PATTERN = re.compile(r"^[1-9][0-9]{0,18}$")


def parse_object_id(raw, resource="resource") -> int:
    """Turn a path segment into an integer id, 400 when it is not one."""
    value = str(raw).strip()
    if not _ID_PATTERN.match(value) or int(value) > MAX_ID:
        raise InvalidParameter(f"Invalid {resource} ID format")
    return int(value)
