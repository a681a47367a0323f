"""Per-record parsing of raw deal payloads.

A value that cannot be coerced to its field type (a non-numeric amount,
an unparseable timestamp) must not reject the whole batch it arrived in.
:func:`parse_deal` keeps the fields that did parse and records a
violation for each one that did not, so the validator reports it like
any other rule failure.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from pydantic import AliasChoices, ValidationError

from fx_deals.schemas.deal import DealRequest

NOT_AN_OBJECT_MESSAGE = "Deal request must be an object"

_UNPARSED_MESSAGES: dict[str, str] = {
    "deal_unique_id": "Deal Unique Id must be a string",
    "from_currency_iso_code": "From Currency ISO Code must be a string",
    "to_currency_iso_code": "To Currency ISO Code must be a string",
    "deal_timestamp": "Deal timestamp must be a valid date-time",
    "deal_amount": "Deal amount must be a number",
}


def _input_keys() -> dict[str, str]:
    """Map every accepted input key (field name or alias) to its field name."""
    keys: dict[str, str] = {}
    for name, info in DealRequest.model_fields.items():
        keys[name] = name
        if isinstance(info.validation_alias, AliasChoices):
            for choice in info.validation_alias.choices:
                if isinstance(choice, str):
                    keys[choice] = name
    return keys


_INPUT_KEYS = _input_keys()


@dataclass(frozen=True)
class MalformedDeal:
    """A record with at least one value that could not be parsed.

    ``request`` holds the fields that did parse (None when the record was
    not an object at all); ``unparsed`` maps each failed field to its
    violation message.
    """

    request: DealRequest | None
    unparsed: Mapping[str, str] = field(default_factory=dict)

    @property
    def deal_unique_id(self) -> str | None:
        return self.request.deal_unique_id if self.request is not None else None


IncomingDeal = DealRequest | MalformedDeal | None


def parse_deal(raw: object) -> IncomingDeal:
    """Parse one raw deal payload without raising.

    Returns:
        The DealRequest when every value parsed, a MalformedDeal otherwise,
        or None for an absent record.
    """
    if raw is None or isinstance(raw, DealRequest):
        return raw
    if not isinstance(raw, Mapping):
        return MalformedDeal(request=None, unparsed={"deal": NOT_AN_OBJECT_MESSAGE})

    values = dict(raw)
    unparsed: dict[str, str] = {}
    # Each retry drops at least one input key, so this terminates
    while True:
        try:
            request = DealRequest.model_validate(values)
            break
        except ValidationError as exc:
            for error in exc.errors():
                key = error["loc"][0] if error["loc"] else None
                name = _INPUT_KEYS.get(key) if isinstance(key, str) else None
                if name is not None and name in unparsed and key not in values:
                    continue
                if name is None or key not in values:
                    return MalformedDeal(
                        request=None,
                        unparsed={"deal": f"Deal request is malformed: {error['msg']}"},
                    )
                unparsed.setdefault(name, _UNPARSED_MESSAGES[name])
                del values[key]

    if unparsed:
        return MalformedDeal(request=request, unparsed=unparsed)
    return request


def parse_deals(raws: Iterable[object] | None) -> list[IncomingDeal]:
    """Parse each raw payload independently; an absent batch parses as empty."""
    return [parse_deal(raw) for raw in raws or []]
