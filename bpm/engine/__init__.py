"""Dependency resolution and fetch engine."""

from bpm.engine.fetcher import ConcurrentFetcher, FetchBatch
from bpm.engine.git_operations import GitOperations
from bpm.engine.manager import PackageManager, build_project_config
from bpm.engine.reconciler import ReconcileReport, Reconciler
from bpm.engine.resolver import DependencyResolver
from bpm.engine.updater import Updater

__all__ = [
    "ConcurrentFetcher",
    "DependencyResolver",
    "FetchBatch",
    "GitOperations",
    "PackageManager",
    "ReconcileReport",
    "Reconciler",
    "Updater",
    "build_project_config",
]
