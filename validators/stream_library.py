"""Rules for ``bunnynet_stream_library`` resources."""

from __future__ import annotations

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.enums import STREAM_PREMIUM_ENCODING_TIER, STREAM_PREMIUM_OUTPUT_CODECS
from core.models import StreamLibrary
from core.validation_rules import rule


@rule("premium_encoding", "Premium Encoding features")
def premium_encoding(library: StreamLibrary) -> Diagnostics:
    diagnostics = Diagnostics()
    if library.encoding_tier is UNKNOWN:
        return diagnostics
    is_premium = library.encoding_tier == STREAM_PREMIUM_ENCODING_TIER

    jit_path = AttributePath.root("jit_encoding")
    if library.jit_encoding is True:
        if not is_premium:
            diagnostics.add_attribute_error(
                jit_path,
                "Premium encoding is not enabled",
                '"jit_encoding" is part of Premium Encoding. You must configure the "encoding_tier" attribute.',
            )
        if library.early_play_enabled is True:
            detail = '"jit_encoding" and "early_play_enabled" cannot be enabled simultaneously.'
            diagnostics.add_attribute_error(jit_path, "Incompatible Attribute Combination", detail)
            diagnostics.add_attribute_error(
                AttributePath.root("early_play_enabled"), "Incompatible Attribute Combination", detail
            )

    if library.output_codecs is UNKNOWN or is_premium:
        return diagnostics
    for codec in library.output_codecs:
        if codec in STREAM_PREMIUM_OUTPUT_CODECS:
            diagnostics.add_attribute_error(
                AttributePath.root("output_codecs"),
                "Premium encoding is not enabled",
                f'"{codec}" is part of Premium Encoding. You must configure the "encoding_tier" attribute.',
            )
    return diagnostics


RULES = (premium_encoding,)
