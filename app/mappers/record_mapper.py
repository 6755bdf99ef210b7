"""Record mapper for masking identity records before they leave the service."""

from typing import Any, Dict, Iterable, List, Optional


class RecordMapper:
    """
    Applies the sensitive-field policy to identity records.

    Responsibilities:
    - Strip sensitive attributes (salary, email) unless PII is allowed
    - Build the matching store projection so the fields are not even read
    """

    @classmethod
    def redact(
        cls,
        record: Dict[str, Any],
        allow_pii: bool,
        sensitive_fields: Iterable[str],
    ) -> Dict[str, Any]:
        """
        Return the record without its sensitive fields.

        Args:
            record: Identity record from the store
            allow_pii: Process-wide PII flag
            sensitive_fields: Field names to strip

        Returns:
            The record itself when PII is allowed, otherwise a shallow copy
        """
        if allow_pii:
            return record
        hidden = set(sensitive_fields)
        return {key: value for key, value in record.items() if key not in hidden}

    @classmethod
    def redact_all(
        cls,
        records: List[Dict[str, Any]],
        allow_pii: bool,
        sensitive_fields: Iterable[str],
    ) -> List[Dict[str, Any]]:
        """Redact every record of a result page."""
        fields = list(sensitive_fields)
        return [cls.redact(record, allow_pii, fields) for record in records]

    @classmethod
    def projection(
        cls,
        allow_pii: bool,
        sensitive_fields: Iterable[str],
    ) -> Optional[Dict[str, int]]:
        """Exclusion projection for identity reads, or None when PII is allowed."""
        if allow_pii:
            return None
        fields = list(sensitive_fields)
        if not fields:
            return None
        return {field: 0 for field in fields}
