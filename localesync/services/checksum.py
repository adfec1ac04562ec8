"""
Source checksum of the automatically translated attributes
"""
import hashlib
from typing import Iterable


def checksum_of(values: Iterable) -> str:
    """MD5 hex digest of the string forms joined in order; None counts as empty"""
    joined = "".join("" if value is None else str(value) for value in values)
    return hashlib.md5(joined.encode("utf-8")).hexdigest()


def translation_checksum(entity, attributes: Iterable[str]) -> str:
    """
    Fingerprint of an entity's automatic attribute values.
    
    Args:
        entity: TranslatableEntity
        attributes: Automatic attribute names in declared order
    
    Returns:
        32-char hex digest
    """
    return checksum_of(entity.read_attribute(name) for name in attributes)
