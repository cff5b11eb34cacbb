"""
Map pipeline outcomes to (HTTP status, JSON body) pairs.

    success             200  artifact
    RequestError        400  {"error"}
    ContractError       422  {"error", "raw"}
    UpstreamError       504 timeout / 429 rate limit / 502 otherwise
                             {"error", "status", "detail"}
    anything else       500  {"error": "Server error"}
"""

from typing import Any, Dict, Tuple

from wrongway.errors import ContractError, RequestError, UpstreamError
from wrongway.generation.pipeline import JokeArtifact

Response = Tuple[int, Dict[str, Any]]

CLIENT_FAULT = 400
METHOD_NOT_ALLOWED = 405
SEMANTIC_FAULT = 422
GENERIC_FAULT = 500
BAD_GATEWAY = 502
GATEWAY_TIMEOUT = 504
RATE_LIMITED = 429


def assemble_success(artifact: JokeArtifact) -> Response:
    return 200, artifact.to_dict()


def upstream_status(exc: UpstreamError) -> int:
    if exc.timed_out:
        return GATEWAY_TIMEOUT
    if exc.status == RATE_LIMITED:
        return RATE_LIMITED
    return BAD_GATEWAY


def assemble_error(exc: BaseException) -> Response:
    if isinstance(exc, RequestError):
        return CLIENT_FAULT, {"error": str(exc)}
    if isinstance(exc, ContractError):
        return SEMANTIC_FAULT, {"error": str(exc), "raw": exc.raw}
    if isinstance(exc, UpstreamError):
        return upstream_status(exc), {
            "error": str(exc),
            "status": exc.status,
            "detail": exc.detail,
        }
    return GENERIC_FAULT, {"error": "Server error"}
