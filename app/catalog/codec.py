"""Decoding of flattened variant attribute strings.

The variant query collapses every attribute value linked to a variant into
one column of the form ``"<id>:<type>:<value>,<id>:<type>:<value>"``. This
module turns that column back into a mapping of attribute type to values.
"""

from dataclasses import asdict, dataclass

from app.domain.exceptions import AttributeDecodeError, ValidationFailedError

TRIPLE_SEPARATOR = ","
FIELD_SEPARATOR = ":"


def check_encodable(attribute_type: str, value: str = "") -> None:
    """Ensure an attribute type and value survive the flattened encoding.

    Types may contain neither separator. Values may contain the field
    separator but not the triple separator.

    Raises:
        ValidationFailedError: If either part contains a reserved separator.
    """
    if TRIPLE_SEPARATOR in attribute_type or FIELD_SEPARATOR in attribute_type:
        raise ValidationFailedError(
            "Attribute type contains a reserved separator",
            details={"attribute_type": attribute_type},
        )
    if TRIPLE_SEPARATOR in value:
        raise ValidationFailedError(
            "Attribute value contains a reserved separator",
            details={"attribute_type": attribute_type, "value": value},
        )


@dataclass(frozen=True)
class AttributeValueRef:
    """Attribute value as seen by readers.

    Attributes:
        id: Attribute value identifier.
        value: Attribute value text.
    """

    id: int
    value: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


def decode_attributes(flattened: str | None) -> dict[str, list[AttributeValueRef]]:
    """Decode a flattened attribute string.

    Groups appear in the order their type is first seen, and values keep
    the order of the source string. The value field may itself contain the
    field separator since each triple is split at most twice.

    Args:
        flattened: Aggregated attribute string, or None when the variant
            has no attribute values.

    Returns:
        Mapping of attribute type to its values.

    Raises:
        AttributeDecodeError: If a triple does not have three fields or its
            id is not an integer.
    """
    decoded: dict[str, list[AttributeValueRef]] = {}
    if not flattened:
        return decoded

    for triple in flattened.split(TRIPLE_SEPARATOR):
        fields = triple.split(FIELD_SEPARATOR, 2)
        if len(fields) != 3:
            raise AttributeDecodeError(triple)

        raw_id, attribute_type, value = fields
        try:
            value_id = int(raw_id)
        except ValueError as e:
            raise AttributeDecodeError(triple) from e

        decoded.setdefault(attribute_type, []).append(
            AttributeValueRef(id=value_id, value=value)
        )

    return decoded
