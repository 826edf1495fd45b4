"""
Post-decode rewrite passes

The schema codec reads XML literally: a <value> without a type element comes
back as bare text, and dateTime.iso8601 payloads keep whatever punctuation the
server chose. These pure functions bring decoded data into the canonical shape
before it is turned into Value objects.
"""

from typing import Any, Callable, Dict, Iterable

from .values import ARRAY, DATETIME, STRING, STRUCT, WireValue, normalize_datetime


SlotPass = Callable[[WireValue], WireValue]


def rewrite_bare_string(slot: WireValue) -> WireValue:
    """Turn an untyped text slot into an explicit string slot."""
    if isinstance(slot, str):
        return {STRING: slot}
    return slot


def rewrite_date(slot: WireValue) -> WireValue:
    """Normalize the separators of a dateTime.iso8601 slot."""
    if isinstance(slot, dict) and isinstance(slot.get(DATETIME), str):
        return {DATETIME: normalize_datetime(slot[DATETIME])}
    return slot


DEFAULT_PASSES = (rewrite_bare_string, rewrite_date)


def map_value_slots(slot: WireValue, fn: SlotPass) -> WireValue:
    """
    Apply fn to every value slot, innermost first.

    Args:
        slot: Wire-shaped value slot
        fn: Function from slot to slot

    Returns:
        New slot; the input is left untouched
    """
    if isinstance(slot, dict) and len(slot) == 1:
        (value_type, payload), = slot.items()

        if value_type == STRUCT and isinstance(payload, dict):
            members = [
                {"name": member.get("name"), "value": map_value_slots(member.get("value"), fn)}
                for member in _as_list(payload.get("member"))
            ]
            slot = {STRUCT: {"member": members}}

        elif value_type == ARRAY and isinstance(payload, dict):
            data = payload.get("data") or {}
            items = [map_value_slots(item, fn) for item in _as_list(data.get("value"))]
            slot = {ARRAY: {"data": {"value": items}}}

    return fn(slot)


def apply_passes(slot: WireValue, passes: Iterable[SlotPass] = DEFAULT_PASSES) -> WireValue:
    """Run each pass over the whole value tree, in order."""
    for rewrite in passes:
        slot = map_value_slots(slot, rewrite)
    return slot


def rewrite_envelope(data: Dict[str, Any],
                     passes: Iterable[SlotPass] = DEFAULT_PASSES) -> Dict[str, Any]:
    """
    Apply the rewrite passes to every top-level value of a decoded envelope.

    Works on both methodCall and methodResponse data: each param value and
    the fault value are rewritten.

    Args:
        data: Envelope data as returned by XmlRpcSchema.decode
        passes: Slot passes to apply

    Returns:
        New envelope data
    """
    passes = tuple(passes)
    result = dict(data)

    if "fault" in data:
        fault = data["fault"] or {}
        result["fault"] = {"value": apply_passes(fault.get("value"), passes)}

    if "params" in data:
        params = data["params"] or {}
        param = params.get("param")
        if isinstance(param, list):
            rewritten = [{"value": apply_passes(item.get("value"), passes)} for item in param]
        elif param is not None:
            rewritten = {"value": apply_passes(param.get("value"), passes)}
        else:
            rewritten = None
        result["params"] = {"param": rewritten} if rewritten is not None else {}

    return result


def _as_list(items: Any) -> list:
    if items is None:
        return []
    if isinstance(items, list):
        return items
    return [items]
