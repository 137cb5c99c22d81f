"""Pipeline orchestration for fetch, verify and execute."""

from kiroboot.pipeline.executor import InstallPipeline

__all__ = ["InstallPipeline"]
