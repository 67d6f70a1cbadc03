#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

CAUSE_TRUNCATED_ESCAPE = "truncated_escape"
CAUSE_TRUNCATED_RUN_LENGTH = "truncated_run_length"
CAUSE_TRUNCATED_RUN = "truncated_run"
CAUSE_CODE_OUT_OF_RANGE = "code_out_of_range"

MALFORMED_CAUSES = (
    CAUSE_TRUNCATED_ESCAPE,
    CAUSE_TRUNCATED_RUN_LENGTH,
    CAUSE_TRUNCATED_RUN,
    CAUSE_CODE_OUT_OF_RANGE,
)


class SmazError(ValueError):
    pass


class MalformedStreamError(SmazError):
    """Compressed stream is truncated or carries a code outside the codebook."""

    def __init__(self, cause: str, offset: int, detail: str = "") -> None:
        msg = f"malformed smaz stream at offset {offset}: {cause}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.cause = cause
        self.offset = offset
