"""Rules for ``bunnynet_pullzone_hostname`` resources."""

from __future__ import annotations

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.models import PullzoneHostname
from core.validation_rules import rule


@rule("custom_certificate", "When using custom certificates, the tls_enabled must be true.")
def custom_certificate(hostname: PullzoneHostname) -> Diagnostics:
    diagnostics = Diagnostics()
    if hostname.certificate is UNKNOWN or not hostname.certificate:
        return diagnostics
    if hostname.tls_enabled is UNKNOWN or hostname.tls_enabled:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("tls_enabled"),
        "Attribute must be set to true",
        '"tls_enabled" must be set to true when defining custom certificates.',
    )
    return diagnostics


@rule("force_ssl_requires_tls", "Requires attribute tls_enabled to be true.")
def force_ssl_requires_tls(hostname: PullzoneHostname) -> Diagnostics:
    diagnostics = Diagnostics()
    if hostname.force_ssl is not True or hostname.tls_enabled is UNKNOWN:
        return diagnostics
    if hostname.tls_enabled:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("force_ssl"),
        "Incompatible Attribute Combination",
        'Attribute "tls_enabled" must also be set to true.',
    )
    return diagnostics


RULES = (custom_certificate, force_ssl_requires_tls)
