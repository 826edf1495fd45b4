"""
XML-RPC Schema Codec

This module turns wire-shaped envelope data into XML-RPC documents and back.
It checks the envelope shape the XML-RPC format prescribes and coerces scalar
payloads, but leaves the canonicalization of decoded data (bare strings,
date punctuation) to the rewrite passes in rpcxml.core.rewrite.
"""

import base64
import binascii
import logging
import math
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Union

from ..core.errors import DecodeError, ValidationError
from ..core.values import (
    ARRAY, BASE64, BOOLEAN, DATETIME, DOUBLE, I4, INT, NIL, STRING, STRUCT,
    VALUE_TYPES, WireValue, format_datetime, normalize_datetime
)
from .rpc_protocol import ENVELOPE_KINDS, METHOD_CALL, METHOD_RESPONSE


INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_CANONICAL_DATETIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})?$"
)
_TRUE_WORDS = ("1", "true")
_FALSE_WORDS = ("0", "false")


class XmlRpcSchema:
    """
    Encoder and decoder for methodCall and methodResponse documents.
    """

    def __init__(self, encoding: str = "UTF-8"):
        """
        Initialize the schema codec.

        Args:
            encoding: Character encoding declared in produced documents
        """
        self.encoding = encoding
        self.logger = logging.getLogger(__name__)

    # Writing

    def encode(self, kind: str, data: Dict[str, Any], pretty: bool = False) -> bytes:
        """
        Produce an XML-RPC document.

        Args:
            kind: "methodCall" or "methodResponse"
            data: Wire-shaped envelope data
            pretty: Indent the output

        Returns:
            Encoded XML document

        Raises:
            ValidationError: If the data does not fit the envelope shape
        """
        self._check_kind(kind, ValidationError)
        root = ET.Element(kind)

        if kind == METHOD_CALL:
            self._write_call(root, data)
        else:
            self._write_response(root, data)

        if pretty:
            ET.indent(root)

        return ET.tostring(root, encoding=self.encoding, xml_declaration=True)

    def _write_call(self, root: ET.Element, data: Dict[str, Any]):
        method_name = data.get("methodName")
        if not isinstance(method_name, str) or not method_name:
            raise ValidationError("methodCall requires a methodName")
        ET.SubElement(root, "methodName").text = method_name

        params = ET.SubElement(root, "params")
        param_list = (data.get("params") or {}).get("param") or []
        if isinstance(param_list, dict):
            param_list = [param_list]

        for index, param in enumerate(param_list):
            self._write_value(ET.SubElement(params, "param"), param.get("value"), f"param[{index}]")

    def _write_response(self, root: ET.Element, data: Dict[str, Any]):
        has_fault = "fault" in data
        has_params = "params" in data
        if has_fault == has_params:
            raise ValidationError("methodResponse requires exactly one of params or fault")

        if has_fault:
            slot = (data["fault"] or {}).get("value")
            if not isinstance(slot, dict) or STRUCT not in slot:
                raise ValidationError("fault value must be a struct")
            self._write_value(ET.SubElement(root, "fault"), slot, "fault")
            return

        param = (data["params"] or {}).get("param")
        if isinstance(param, list):
            if len(param) != 1:
                raise ValidationError(f"methodResponse requires exactly one param, got {len(param)}")
            param = param[0]
        if not param:
            raise ValidationError("methodResponse requires exactly one param")

        params = ET.SubElement(root, "params")
        self._write_value(ET.SubElement(params, "param"), param.get("value"), "param")

    def _write_value(self, parent: ET.Element, slot: WireValue, path: str):
        element = ET.SubElement(parent, "value")

        if isinstance(slot, str):
            slot = {STRING: slot}
        if not isinstance(slot, dict) or len(slot) != 1:
            raise ValidationError(f"{path}: a value must carry exactly one type")

        (value_type, payload), = slot.items()
        if value_type not in VALUE_TYPES:
            raise ValidationError(f"{path}: unknown value type '{value_type}'")

        typed = ET.SubElement(element, value_type)

        if value_type == STRUCT:
            for member in (payload or {}).get("member") or []:
                name = member.get("name")
                if not isinstance(name, str):
                    raise ValidationError(f"{path}: struct member without a name")
                member_element = ET.SubElement(typed, "member")
                ET.SubElement(member_element, "name").text = name
                self._write_value(member_element, member.get("value"), f"{path}.{name}")

        elif value_type == ARRAY:
            data = ET.SubElement(typed, "data")
            items = ((payload or {}).get("data") or {}).get("value") or []
            for index, item in enumerate(items):
                self._write_value(data, item, f"{path}[{index}]")

        elif value_type != NIL or payload is not None:
            typed.text = self._format_scalar(value_type, payload, path)

    def _format_scalar(self, value_type: str, payload: Any, path: str) -> str:
        """Coerce a scalar payload into its wire text."""
        if value_type == STRING:
            if not isinstance(payload, str):
                raise ValidationError(f"{path}: string payload must be str, got {type(payload).__name__}")
            return payload

        if value_type in (INT, I4):
            number = self._coerce_int(payload, path)
            if not INT_MIN <= number <= INT_MAX:
                raise ValidationError(f"{path}: {number} does not fit a 32-bit {value_type}")
            return str(number)

        if value_type == DOUBLE:
            if isinstance(payload, bool):
                raise ValidationError(f"{path}: boolean given for a double")
            try:
                number = float(payload)
            except (TypeError, ValueError):
                raise ValidationError(f"{path}: '{payload}' is not a double")
            if not math.isfinite(number):
                raise ValidationError(f"{path}: double must be finite")
            return repr(number)

        if value_type == BOOLEAN:
            return "1" if self._coerce_bool(payload, path) else "0"

        if value_type == DATETIME:
            text = format_datetime(payload)
            if not _CANONICAL_DATETIME.match(text):
                raise ValidationError(f"{path}: '{text}' is not a valid {DATETIME}")
            return text

        if value_type == BASE64:
            if isinstance(payload, str):
                payload = payload.encode("utf-8")
            if not isinstance(payload, (bytes, bytearray, memoryview)):
                raise ValidationError(f"{path}: base64 payload must be bytes, got {type(payload).__name__}")
            return base64.b64encode(bytes(payload)).decode("ascii")

        raise ValidationError(f"{path}: nil value cannot carry a payload")

    @staticmethod
    def _coerce_int(payload: Any, path: str) -> int:
        if isinstance(payload, bool):
            raise ValidationError(f"{path}: boolean given for an int")
        if isinstance(payload, int):
            return payload
        if isinstance(payload, float) and payload.is_integer():
            return int(payload)
        if isinstance(payload, str):
            try:
                return int(payload.strip())
            except ValueError:
                pass
        raise ValidationError(f"{path}: '{payload}' is not an integer")

    @staticmethod
    def _coerce_bool(payload: Any, path: str) -> bool:
        if isinstance(payload, bool):
            return payload
        if isinstance(payload, int) and payload in (0, 1):
            return bool(payload)
        if isinstance(payload, str):
            word = payload.strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
        raise ValidationError(f"{path}: '{payload}' is not a boolean")

    # Reading

    def decode(self, kind: str, wire: Union[bytes, str]) -> Dict[str, Any]:
        """
        Read an XML-RPC document into wire-shaped envelope data.

        Untyped <value> text is returned as a bare str; dateTime payloads
        are returned as sent.

        Args:
            kind: "methodCall" or "methodResponse"
            wire: XML document

        Returns:
            Envelope data

        Raises:
            DecodeError: If the document is not a well-formed envelope
        """
        self._check_kind(kind, DecodeError)
        if isinstance(wire, str):
            wire = wire.encode("utf-8")
        if not wire or not wire.strip():
            raise DecodeError("empty document")

        try:
            root = ET.fromstring(wire)
        except ET.ParseError as e:
            raise DecodeError(f"XML syntax error: {e}")

        if root.tag != kind:
            raise DecodeError(f"expected <{kind}>, got <{root.tag}>")

        self.logger.debug(f"Decoding {kind} of {len(wire)} bytes")

        if kind == METHOD_CALL:
            return self._read_call(root)
        return self._read_response(root)

    def _read_call(self, root: ET.Element) -> Dict[str, Any]:
        method_name = root.find("methodName")
        if method_name is None or not (method_name.text or "").strip():
            raise DecodeError("methodCall without a methodName")

        params = []
        params_element = root.find("params")
        if params_element is not None:
            for param in params_element.findall("param"):
                params.append({"value": self._read_param_value(param)})

        return {"methodName": method_name.text.strip(), "params": {"param": params}}

    def _read_response(self, root: ET.Element) -> Dict[str, Any]:
        children = list(root)
        if len(children) != 1 or children[0].tag not in ("params", "fault"):
            raise DecodeError("methodResponse must hold exactly one of params or fault")

        body = children[0]
        if body.tag == "fault":
            return {"fault": {"value": self._read_param_value(body)}}

        params = body.findall("param")
        if len(params) != 1:
            raise DecodeError(f"methodResponse must hold exactly one param, got {len(params)}")
        return {"params": {"param": {"value": self._read_param_value(params[0])}}}

    def _read_param_value(self, parent: ET.Element) -> WireValue:
        values = parent.findall("value")
        if len(values) != 1:
            raise DecodeError(f"<{parent.tag}> must hold exactly one value")
        return self._read_value(values[0])

    def _read_value(self, element: ET.Element) -> WireValue:
        children = list(element)
        if not children:
            return element.text or ""
        if len(children) != 1:
            raise DecodeError("a value must carry exactly one type")

        typed = children[0]
        value_type = typed.tag
        text = typed.text or ""

        if value_type == STRING:
            return {STRING: text}

        if value_type in (INT, I4):
            try:
                number = int(text.strip())
            except ValueError:
                raise DecodeError(f"'{text}' is not an integer")
            if not INT_MIN <= number <= INT_MAX:
                raise DecodeError(f"{number} does not fit a 32-bit {value_type}")
            return {value_type: number}

        if value_type == DOUBLE:
            try:
                number = float(text.strip())
            except ValueError:
                raise DecodeError(f"'{text}' is not a double")
            if not math.isfinite(number):
                raise DecodeError(f"double must be finite, got '{text.strip()}'")
            return {DOUBLE: number}

        if value_type == BOOLEAN:
            word = text.strip().lower()
            if word in _TRUE_WORDS:
                return {BOOLEAN: True}
            if word in _FALSE_WORDS:
                return {BOOLEAN: False}
            raise DecodeError(f"'{text}' is not a boolean")

        if value_type == DATETIME:
            if not _CANONICAL_DATETIME.match(normalize_datetime(text.strip())):
                raise DecodeError(f"'{text.strip()}' is not a valid {DATETIME}")
            return {DATETIME: text.strip()}

        if value_type == BASE64:
            try:
                return {BASE64: base64.b64decode(text)}
            except (binascii.Error, ValueError) as e:
                raise DecodeError(f"invalid base64 payload: {e}")

        if value_type == NIL:
            if text.strip() or len(typed):
                raise DecodeError("nil value cannot carry a payload")
            return {NIL: None}

        if value_type == STRUCT:
            return {STRUCT: {"member": self._read_members(typed)}}

        if value_type == ARRAY:
            data = typed.find("data")
            if data is None:
                raise DecodeError("array without a data element")
            return {ARRAY: {"data": {"value": [self._read_value(item) for item in data.findall("value")]}}}

        raise DecodeError(f"unknown value type '{value_type}'")

    def _read_members(self, struct: ET.Element) -> List[Dict[str, Any]]:
        members = []
        for member in struct.findall("member"):
            name = member.find("name")
            if name is None:
                raise DecodeError("struct member without a name")
            members.append({"name": name.text or "", "value": self._read_param_value(member)})
        return members

    @staticmethod
    def _check_kind(kind: str, error: type):
        if kind not in ENVELOPE_KINDS:
            raise error(f"unknown envelope kind '{kind}', expected one of {', '.join(ENVELOPE_KINDS)}")
