# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
FP_A message registry and header dispatch.

The registry maps (header, version) to the decoder and exact token count of
every supported message. It is assembled once at import and never modified,
so lookups need no locking. Adding a message type means adding one record
class and one ``MessageSpec`` entry below.

Dispatch order:
1. header not registered -> UnknownMessageType
2. version not registered for that header -> UnsupportedVersion
3. token count differs from the registered size -> MalformedMessage
4. otherwise the decoder's result (or its FieldParseError)
"""

import logging
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from ..core.constants import HEADER_IDX, VERSION_IDX
from ..core.errors import MalformedMessage, UnknownMessageType, UnsupportedVersion
from .converters import to_int
from .fpa import (ODOMENU, ODOMETRY, ODOMSH, CorrImuRecord, GnssAntRecord,
                  GnssCorrRecord, LlhRecord, OdometryRecord, RawImuRecord,
                  TextRecord, TfRecord)
from .tokenizer import strip_terminator, split_message, with_marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageSpec:
    """Registry entry for one (header, version) pair"""
    header: str
    version: int
    size: int
    decoder: Callable[[Sequence[str]], object]
    text_tail: bool = False  # last field is free text that may contain the delimiter


_SPECS = (
    MessageSpec(ODOMETRY.header, ODOMETRY.version, ODOMETRY.size,
                partial(OdometryRecord.convert_from_tokens, variant=ODOMETRY)),
    MessageSpec(ODOMENU.header, ODOMENU.version, ODOMENU.size,
                partial(OdometryRecord.convert_from_tokens, variant=ODOMENU)),
    MessageSpec(ODOMSH.header, ODOMSH.version, ODOMSH.size,
                partial(OdometryRecord.convert_from_tokens, variant=ODOMSH)),
    MessageSpec("LLH", 1, 14, LlhRecord.convert_from_tokens),
    MessageSpec("TF", 2, 14, TfRecord.convert_from_tokens),
    MessageSpec("RAWIMU", 1, 11, RawImuRecord.convert_from_tokens),
    MessageSpec("CORRIMU", 1, 11, CorrImuRecord.convert_from_tokens),
    MessageSpec("GNSSANT", 1, 11, GnssAntRecord.convert_from_tokens),
    MessageSpec("GNSSCORR", 1, 20, GnssCorrRecord.convert_from_tokens),
    MessageSpec("TEXT", 1, 5, TextRecord.convert_from_tokens, text_tail=True),
)


def _build_registry(specs) -> Mapping[str, Mapping[int, MessageSpec]]:
    table: dict[str, dict[int, MessageSpec]] = {}
    for spec in specs:
        versions = table.setdefault(spec.header, {})
        if spec.version in versions:
            raise ValueError(f"Duplicate FP_A registry entry: {spec.header} v{spec.version}")
        versions[spec.version] = spec
    return MappingProxyType({h: MappingProxyType(v) for h, v in table.items()})


MESSAGE_REGISTRY = _build_registry(_SPECS)


def supported_messages() -> list[tuple[str, int]]:
    """All registered (header, version) pairs"""
    return [(spec.header, spec.version) for spec in _SPECS]


def lookup(header: str, version) -> MessageSpec:
    """Find the registry entry for a header and a version token or integer"""
    versions = MESSAGE_REGISTRY.get(header)
    if versions is None:
        raise UnknownMessageType(header)
    if isinstance(version, str):
        try:
            version = to_int(version)
        except ValueError:
            raise UnsupportedVersion(header, version) from None
    spec = versions.get(version)
    if spec is None:
        raise UnsupportedVersion(header, version)
    return spec


def _spec_for(tokens: list[str]) -> MessageSpec:
    if len(tokens) <= HEADER_IDX:
        raise UnknownMessageType("")
    header = tokens[HEADER_IDX]
    if header not in MESSAGE_REGISTRY:
        raise UnknownMessageType(header)
    if len(tokens) <= VERSION_IDX:
        # header alone, there is no version to check
        spec = next(iter(MESSAGE_REGISTRY[header].values()))
        raise MalformedMessage(header, spec.size, len(tokens))
    return lookup(header, tokens[VERSION_IDX])


def decode_tokens(tokens: Sequence[str]):
    """Decode one FP_A message from its tokens.

    ``tokens`` may start with the '$FP' marker or directly with the header.

    Returns
    -------
    record
        One of the record types from ``pyfpa.messages.fpa``

    Raises
    ------
    UnknownMessageType, UnsupportedVersion, MalformedMessage, FieldParseError
    """
    if not tokens:
        raise UnknownMessageType("")
    tokens = list(tokens)
    marked = with_marker(tokens)
    spec = _spec_for(marked)
    if len(marked) != spec.size:
        raise MalformedMessage(spec.header, spec.size, len(marked))
    # decoders report field positions relative to the tokens as passed in
    record = spec.decoder(tokens)
    logger.debug("Decoded %s v%d", spec.header, spec.version)
    return record


def decode_line(line: str):
    """Decode one raw FP_A line.

    Line endings and a trailing '*HH' checksum are stripped first. For
    messages ending in free text, the remainder of the line after the fixed
    fields is kept as a single token so delimiters inside the text survive.
    """
    body = strip_terminator(line)
    raw = split_message(body)
    marked = with_marker(raw)
    spec = _spec_for(marked)
    if spec.text_tail and len(marked) > spec.size:
        # marker may be implied, in which case the line carries one field less
        n_fields = spec.size - (len(marked) - len(raw))
        raw = split_message(body, maxsplit=n_fields - 1)
    return decode_tokens(raw)


__all__ = ['MessageSpec', 'MESSAGE_REGISTRY', 'supported_messages', 'lookup',
           'decode_tokens', 'decode_line']
