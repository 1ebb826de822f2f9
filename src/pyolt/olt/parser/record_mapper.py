# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from typing import Any

from pyolt.lib.exceptions import MalformedRecordError
from pyolt.lib.identifiers import short_pon_id
from pyolt.lib.types import FieldChunk, RawFieldSequence
from pyolt.olt.parser.field_codec import FieldCodec
from pyolt.olt.parser.field_schema import M, FieldKind, FieldSpec, RecordSchema
from pyolt.olt.parser.js_array import JsArrayExtractor


class RecordMapper:
    """
    Turn Raw Field Sequences Into Typed Records.

    In the default lenient mode numeric corruption decodes to 0. With
    ``strict=True`` the mapper raises ``FieldDecodeError`` instead, which is
    what page-validation tooling wants.
    """

    def __init__(self, strict: bool = False) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.strict = strict

    def map_chunks(self, fields: RawFieldSequence, schema: RecordSchema[M]) -> list[M]:
        """
        Map A Flat Multi-Record Sequence.

        The sequence is split into ``schema.arity``-sized chunks; a trailing
        undersized chunk is dropped without error.
        """
        records: list[M] = []
        for chunk in JsArrayExtractor.chunk(fields, schema.arity):
            if len(chunk) < schema.arity:
                self.logger.debug("Dropping trailing %s chunk of %d/%d fields",
                                  schema.var_name, len(chunk), schema.arity)
                continue
            records.append(self.decode(chunk, schema))
        return records

    def map_single(self, fields: RawFieldSequence, schema: RecordSchema[M]) -> M:
        """
        Map A Single-Record Sequence.

        Raises:
            MalformedRecordError: If fewer than ``schema.min_arity`` fields are present.
        """
        if len(fields) < schema.min_arity:
            raise MalformedRecordError(schema.var_name, len(fields), schema.min_arity)
        return self.decode(fields, schema)

    def decode(self, chunk: FieldChunk, schema: RecordSchema[M]) -> M:
        data: dict[str, Any] = {}
        for field in schema.fields:
            value = self._decode_field(chunk[field.position], field)
            if field.group is None:
                data[field.name] = value
            else:
                data.setdefault(field.group, {})[field.name] = value
        return schema.model.model_validate(data)

    def _decode_field(self, raw: str, field: FieldSpec) -> Any:
        kind = field.kind
        if kind is FieldKind.TEXT:
            return raw
        if kind is FieldKind.INT:
            return FieldCodec.strict_int(raw) if self.strict else FieldCodec.to_int(raw)
        if kind is FieldKind.FLOAT:
            return FieldCodec.strict_float(raw) if self.strict else FieldCodec.to_float(raw)
        if kind is FieldKind.ONLINE_STATUS:
            return FieldCodec.online_status(raw)
        if kind is FieldKind.CTC_STATUS:
            return FieldCodec.ctc_status(raw)
        if kind is FieldKind.ACTIVATION:
            return FieldCodec.is_activated(raw)
        if kind is FieldKind.DISTANCE:
            return FieldCodec.distance_meters(raw, strict=self.strict)
        if kind is FieldKind.SHORT_PON_ID:
            return short_pon_id(raw)
        raise ValueError(f"unhandled field kind: {kind}")
