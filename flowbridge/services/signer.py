"""
Flow request signing.

Flow authenticates every request with an HMAC-SHA256 over the request
parameters:

1. sort parameter names by code point (NOT locale collation, NOT case folding)
2. concatenate name + value for each, with no separators
3. HMAC-SHA256 with the secret key, rendered as lowercase hex

The signature is sent as the "s" parameter and is never part of its own input.

SECURITY: The secret key and parameter values are never logged. The optional
trace only exposes parameter names, the canonical string's length and a
SHA-256 fingerprint, which is enough to compare against Flow's side when a
signature is rejected.
"""

import hashlib
import hmac
import math
from collections.abc import Mapping
from decimal import Decimal

from structlog import get_logger

logger = get_logger(__name__)

SIGNATURE_PARAM = "s"

ParamValue = str | int | float


def format_value(value: ParamValue) -> str:
    """
    Render a parameter value the way Flow reads it.

    Numbers are positional decimal: integral values have no decimal part
    ("1000", never "1000.0") and small fractions never use an exponent
    ("0.00005", never "5e-05"). No thousands separators or forced signs.
    """
    if isinstance(value, bool):
        raise TypeError("Boolean values are not valid Flow parameters")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite numbers are not valid Flow parameters: {value!r}")
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return str(value)


def canonicalize(params: Mapping[str, ParamValue]) -> str:
    """Build the string-to-sign: name1value1name2value2... in sorted name order."""
    return "".join(f"{name}{format_value(params[name])}" for name in sorted(params))


def sign(params: Mapping[str, ParamValue], secret_key: str, *, trace: bool = False) -> str:
    """
    Sign request parameters with HMAC-SHA256.

    Args:
        params: Parameters to sign, API key included, signature excluded
        secret_key: Flow secret key
        trace: Log a redacted description of the canonical string

    Returns:
        64-character lowercase hex signature
    """
    to_sign = canonicalize(params)
    signature = hmac.new(
        secret_key.encode("utf-8"),
        to_sign.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

    if trace:
        logger.debug(
            "flow_request_signed",
            param_names=sorted(params),
            canonical_length=len(to_sign),
            canonical_sha256=hashlib.sha256(to_sign.encode("utf-8")).hexdigest(),
            signature_prefix=signature[:8],
        )

    return signature


def sign_params(
    params: Mapping[str, ParamValue],
    secret_key: str,
    *,
    trace: bool = False,
) -> dict[str, str]:
    """
    Return the wire parameters: every value rendered as text, the signature
    added under "s", entries in sorted name order.

    The sort only fixes transmission order; Flow re-sorts before verifying.
    """
    if SIGNATURE_PARAM in params:
        raise ValueError(f"'{SIGNATURE_PARAM}' is reserved for the request signature")

    signed = {name: format_value(value) for name, value in params.items()}
    signed[SIGNATURE_PARAM] = sign(params, secret_key, trace=trace)
    return {name: signed[name] for name in sorted(signed)}
