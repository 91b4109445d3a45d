from atlas.analysis.backends import DEFAULT_BACKENDS, Backend, BackendRotation
from atlas.analysis.factory import AnalysisClientFactory, build_invoker
from atlas.analysis.invoker import AnalysisInvoker, AnalysisResult

__all__ = [
    "DEFAULT_BACKENDS",
    "AnalysisClientFactory",
    "AnalysisInvoker",
    "AnalysisResult",
    "Backend",
    "BackendRotation",
    "build_invoker",
]
