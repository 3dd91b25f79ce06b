"""HTTP request pipeline: transport, middlewares and composition."""

from .caching import CachingMiddleware
from .instrumentation import InstrumentationMiddleware
from .oauth import OAuth2ParamsMiddleware
from .pipeline import RequestPipeline, build_pipeline, compose
from .status import RaiseForStatusMiddleware
from .transport import RequestsTransport

__all__ = [
    "CachingMiddleware",
    "InstrumentationMiddleware",
    "OAuth2ParamsMiddleware",
    "RaiseForStatusMiddleware",
    "RequestPipeline",
    "RequestsTransport",
    "build_pipeline",
    "compose",
]
